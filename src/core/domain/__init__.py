"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras: valor JSON, errores y contexto.
- El dominio no conoce httpx: solo conceptos del problema.
"""
