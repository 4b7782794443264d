from . import health, incidents

__all__ = ["health", "incidents"]
