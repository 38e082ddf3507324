"""
Record backends for ClientStore.
"""

from .backends import BlobRecordBackend, InMemoryRecordBackend

__all__ = ["BlobRecordBackend", "InMemoryRecordBackend"]
