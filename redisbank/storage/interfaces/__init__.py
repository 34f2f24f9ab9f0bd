"""
Interfaces for the storage system.

This module contains interfaces for the storage system,
which are used to abstract the underlying key-value backend.
"""

from .primitive_store import PrimitiveStore

__all__ = ['PrimitiveStore']
