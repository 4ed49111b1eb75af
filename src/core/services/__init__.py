"""Servicios del core: orquestación de cache/upstream y búsqueda."""
