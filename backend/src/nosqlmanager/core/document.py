# backend/src/nosqlmanager/core/document.py
from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from nosqlmanager.errors import InvalidArgument


@dataclass
class Document:
    """A stored document: integer primary key plus an opaque JSON value."""
    id: Optional[int]
    data: Any = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        # member order on disk: id, then data
        return {"id": self.id, "data": self.data}

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "Document":
        return cls(obj.get("id"), obj.get("data"))


# ----------------------------- Input parsing ---------------------------------

def parse_id(text: Any) -> int:
    """Parse an id typed by a user (form field, URL, CLI arg)."""
    if isinstance(text, bool):
        raise InvalidArgument("id must be an integer")
    if isinstance(text, int):
        return text
    s = "" if text is None else str(text).strip()
    if not s:
        raise InvalidArgument("id cannot be empty")
    try:
        return int(s, 10)
    except ValueError:
        raise InvalidArgument(f"id must be an integer: {s!r}") from None


def parse_data(text: Optional[str]) -> Any:
    """Empty text means an empty object; anything else must be valid JSON."""
    s = (text or "").strip()
    if not s:
        return {}
    try:
        return json.loads(s)
    except json.JSONDecodeError as e:
        raise InvalidArgument(f"invalid JSON data: {e.msg} (line {e.lineno}, col {e.colno})") from e


def parse_field_query(text: str) -> Tuple[str, str]:
    """'campo:valor' -> ('campo', 'valor'); splits on the first colon only."""
    if not text or ":" not in text:
        raise InvalidArgument("field query must look like 'field:value'")
    name, value = text.split(":", 1)
    if not name:
        raise InvalidArgument("field name cannot be empty")
    return name, value
