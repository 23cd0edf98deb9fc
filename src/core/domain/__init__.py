"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2) y los
  parsers de valores de parámetros.
- El dominio no conoce HTTP, CLI, ni stdin: solo conceptos del problema.
"""
