"""Valores del dominio: versiones de API, hosts, rutas y modelos.

Por qué:
- Estructuras y funciones puras; aquí no vive código HTTP, CLI ni SDK.
"""
