"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) para el contexto de ejecución y el cliente.
- Los servicios consumidores dependen de estas formas, no de httpx.
"""
