"""Core: dominio, servicios y configuración (sin dependencias de HTTP/CLI)."""
