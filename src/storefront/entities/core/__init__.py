from ._base import EntityTable, Payload, utcnow

__all__ = ["EntityTable", "Payload", "utcnow"]
