# backend/src/nosqlmanager/__init__.py
from nosqlmanager.core.document import Document, parse_id, parse_data, parse_field_query
from nosqlmanager.AVL.AVL_api import AVLTree
from nosqlmanager.AVL.codec import DocumentCodec
from nosqlmanager.config import StoreConfig
from nosqlmanager.errors import (
    NoSQLManagerError, InvalidArgument, NotFound, CorruptFile, IoFailure,
)
from nosqlmanager.events import MutationFeed, Inserted, Updated, Deleted, Cleared
from nosqlmanager.manager import DatabaseManager

__all__ = [
    "AVLTree", "Document", "DocumentCodec", "DatabaseManager", "StoreConfig",
    "MutationFeed", "Inserted", "Updated", "Deleted", "Cleared",
    "NoSQLManagerError", "InvalidArgument", "NotFound", "CorruptFile", "IoFailure",
    "parse_id", "parse_data", "parse_field_query",
]
