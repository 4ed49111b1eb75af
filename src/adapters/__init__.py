"""Adaptadores de I/O (HTTP upstream, exportación a disco)."""
