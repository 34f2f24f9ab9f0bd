from .query_engine import QueryEngine

__all__ = ["QueryEngine"]
