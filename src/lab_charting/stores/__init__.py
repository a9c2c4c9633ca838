"""
Document store backends and the typed-field wire codec.

Domain repositories live in stores.repositories.
"""

from .base import DocumentStore, split_path, join_path
from .field_codec import encode_value, decode_value, encode_fields, decode_fields
from .sqlite_store import SQLiteDocumentStore
from .memory_store import InMemoryDocumentStore

__all__ = [
    "DocumentStore",
    "split_path",
    "join_path",
    "encode_value",
    "decode_value",
    "encode_fields",
    "decode_fields",
    "SQLiteDocumentStore",
    "InMemoryDocumentStore",
]
