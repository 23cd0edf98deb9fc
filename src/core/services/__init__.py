"""Servicios del Core: resolución de parámetros y orquestación de comandos."""
