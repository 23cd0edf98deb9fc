"""Core: configuración, dominio, servicios y errores.

No depende de la CLI; los adaptadores de I/O viven en `adapters`.
"""
