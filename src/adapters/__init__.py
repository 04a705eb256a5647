"""Adapters: httpx transports and the Engine API client."""
