# backend/src/nosqlmanager/manager.py
from __future__ import annotations
import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import ValidationError

from nosqlmanager import scans
from nosqlmanager.AVL.AVL_api import AVLTree
from nosqlmanager.AVL.codec import DocumentCodec, RecordCodec
from nosqlmanager.AVL.data_file import DataFile
from nosqlmanager.config import StoreConfig
from nosqlmanager.core.document import Document
from nosqlmanager.errors import CorruptFile, InvalidArgument, IoFailure
from nosqlmanager.events import Cleared, Deleted, Inserted, MutationFeed, Updated

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Document store: AVL index in memory, whole-file JSON mirror on disk.

    The index is the authoritative state. Every successful mutation rewrites
    the mirror before returning; a failed write raises IoFailure and leaves the
    in-memory change in place. Not thread-safe.
    """

    def __init__(self, config: Union[StoreConfig, str, None] = None, *,
                 codec: Optional[RecordCodec] = None, feed: Optional[MutationFeed] = None):
        if config is None:
            config = StoreConfig()
        elif not isinstance(config, StoreConfig):
            try:
                config = StoreConfig(file_path=str(config))
            except ValidationError as e:
                raise InvalidArgument(f"invalid store config: {e.errors()[0]['msg']}") from e
        self.config = config
        # an empty MutationFeed is falsy (len 0), so compare against None
        self.codec = codec if codec is not None else DocumentCodec()
        self.feed = feed if feed is not None else MutationFeed()
        self.file = DataFile(config.file_path)
        self.index: AVLTree[int, Document] = AVLTree()
        # Set when construction had to discard the file (CorruptFile / IoFailure)
        self.load_error: Optional[Exception] = None
        self._load_from_file()

    @classmethod
    def open(cls, path: str, **kwargs: Any) -> "DatabaseManager":
        return cls(path, **kwargs)

    @property
    def file_path(self) -> str:
        return self.config.file_path

    # ---- persistence ----
    def _load_from_file(self) -> None:
        try:
            if self.file.size() == 0:
                return
            docs = self.codec.decode(self.file.read_all())
        except (CorruptFile, IoFailure) as e:
            self.load_error = e
            logger.warning("starting empty, could not load %s: %s", self.file_path, e)
            return
        for doc in docs:
            self.index.insert(doc.id, doc)
        logger.info("loaded %d documents from %s", self.index.size(), self.file_path)

    def _save_to_file(self) -> None:
        payload = self.codec.encode(self.index.values())
        self.file.write_all(payload)
        logger.debug("mirror written: %d documents, %d bytes", self.index.size(), len(payload))

    def export_to(self, path: str) -> None:
        """Write the current contents to another file; the store keeps its own path."""
        DataFile(path).write_all(self.codec.encode(self.index.values()))
        logger.info("exported %d documents to %s", self.index.size(), path)

    # ---- CRUD ----
    @staticmethod
    def _check_id(id: Any) -> int:
        if id is None:
            raise InvalidArgument("id cannot be None")
        if isinstance(id, bool) or not isinstance(id, int):
            raise InvalidArgument(f"id must be an integer, got {type(id).__name__}")
        return id

    @classmethod
    def _require_document(cls, document: Optional[Document]) -> int:
        """Validate before touching the index: a rejected document leaves no trace."""
        if document is None:
            raise InvalidArgument("document cannot be None")
        key = cls._check_id(document.id)
        try:
            json.dumps(document.data)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"data of document {key} is not JSON serializable: {e}") from e
        return key

    def save(self, document: Document) -> None:
        """Insert or overwrite (upsert), then flush the mirror."""
        key = self._require_document(document)
        existed = self.index.contains(key)
        self.index.insert(key, document)
        logger.debug("save id=%d (%s)", key, "update" if existed else "insert")
        self._save_to_file()
        self.feed.publish(Updated(key) if existed else Inserted(key))

    def find_by_id(self, id: int) -> Optional[Document]:
        return self.index.search(self._check_id(id))

    def update(self, document: Document) -> bool:
        """Overwrite an existing document. False if the id is absent."""
        key = self._require_document(document)
        if not self.index.contains(key):
            return False
        self.index.insert(key, document)
        logger.debug("update id=%d", key)
        self._save_to_file()
        self.feed.publish(Updated(key))
        return True

    def delete_by_id(self, id: int) -> bool:
        if not self.index.delete(self._check_id(id)):
            return False
        logger.debug("delete id=%d", id)
        self._save_to_file()
        self.feed.publish(Deleted(id))
        return True

    def exists_by_id(self, id: int) -> bool:
        return self.index.contains(self._check_id(id))

    def all_documents(self) -> List[Document]:
        return list(self.index.values())

    def all_keys(self) -> List[int]:
        return list(self.index.keys_in_order())

    def size(self) -> int:
        return self.index.size()

    def is_empty(self) -> bool:
        return self.index.is_empty()

    def clear(self) -> None:
        self.index.clear()
        logger.info("cleared %s", self.file_path)
        self._save_to_file()
        self.feed.publish(Cleared())

    # ---- scans ----
    def find_by_predicate(self, predicate: scans.Predicate) -> List[Document]:
        return scans.scan(self.index.values(), predicate)

    def find_by_field_equals(self, field_name: str, value: str) -> List[Document]:
        return self.find_by_predicate(scans.field_equals(field_name, value))

    def find_by_field_contains(self, field_name: str, value: str) -> List[Document]:
        return self.find_by_predicate(scans.field_contains(field_name, value))

    # ---- viewer support ----
    def index_snapshot(self) -> Optional[Dict[str, Any]]:
        return self.index.snapshot()

    def print_index(self) -> List[str]:
        rows = self.index.as_array()
        logger.info("AVL index as binary-heap array:")
        for i, cell in enumerate(rows):
            logger.info("[%d]: %s", i, cell)
        return rows

    def __len__(self) -> int: return self.index.size()
    def __contains__(self, id: object) -> bool:
        return isinstance(id, int) and not isinstance(id, bool) and self.index.contains(id)
    def __iter__(self) -> Iterator[Document]: return self.index.values()
