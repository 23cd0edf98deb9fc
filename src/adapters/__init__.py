"""Adaptadores de I/O (HTTP).

Por qué:
- Aíslan httpx y el contrato de la API remota del resto del Core.
"""
