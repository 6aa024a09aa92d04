from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, List, Protocol
import json

from nosqlmanager.core.document import Document
from nosqlmanager.errors import CorruptFile

# ----------------------------- Codec Layer -----------------------------------

class RecordCodec(Protocol):
    """Protocol for (de)serializing a whole ordered document sequence to bytes."""
    def encode(self, docs: Iterable[Document]) -> bytes: ...
    def decode(self, raw: bytes) -> List[Document]: ...


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


@dataclass
class DocumentCodec(RecordCodec):
    """JSON array of {"id", "data"} objects, pretty printed."""
    indent: int = 2
    encoding: str = "utf-8"

    def encode(self, docs: Iterable[Document]) -> bytes:
        payload = [d.to_dict() for d in docs]
        if not payload:
            return b"[]"
        return json.dumps(payload, indent=self.indent, ensure_ascii=False).encode(self.encoding)

    def decode(self, raw: bytes) -> List[Document]:
        if not raw or not raw.strip():
            return []
        try:
            text = raw.decode(self.encoding)
            payload = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptFile(f"cannot decode document file: {e}") from e
        if not isinstance(payload, list):
            raise CorruptFile(f"expected a JSON array, got {type(payload).__name__}")
        out: List[Document] = []
        for pos, item in enumerate(payload):
            if not isinstance(item, dict):
                raise CorruptFile(f"element {pos} is not an object")
            if not _is_int(item.get("id")):
                raise CorruptFile(f"element {pos} has no integer 'id'")
            # missing data decodes as JSON null
            out.append(Document(item["id"], item.get("data")))
        return out
