"""Interfaces/abstracciones del Core.

Por qué:
- Define el contrato (Protocol) de ping que implementa el cliente del engine.
- Permite invertir dependencias: el Core depende de abstracciones.
"""
