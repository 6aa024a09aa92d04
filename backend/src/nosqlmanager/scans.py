# backend/src/nosqlmanager/scans.py
from __future__ import annotations
import math
from decimal import Decimal
from typing import Any, Callable, Iterable, List

from nosqlmanager.core.document import Document

Predicate = Callable[[Document], bool]


def as_text(v: Any) -> str:
    """Scalar text projection used by field scans.

    Strings as-is, integers in decimal, floats in the JVM Double.toString form,
    booleans and null as their JSON literals. Objects and arrays project to "".
    """
    if isinstance(v, str): return v
    if v is None: return "null"
    if isinstance(v, bool): return "true" if v else "false"
    if isinstance(v, int): return str(v)
    if isinstance(v, float): return _double_text(v)
    return ""


def _double_text(v: float) -> str:
    """JVM Double.toString form: plain decimal in [1e-3, 1e7), else d.dddEn."""
    if math.isnan(v): return "NaN"
    if math.isinf(v): return "Infinity" if v > 0 else "-Infinity"
    if v == 0.0: return "-0.0" if math.copysign(1.0, v) < 0 else "0.0"
    if 1e-3 <= abs(v) < 1e7:
        return repr(v)
    _, digits, exp = Decimal(repr(abs(v))).as_tuple()
    e = len(digits) - 1 + exp
    rest = "".join(map(str, digits[1:])).rstrip("0") or "0"
    return f"{'-' if v < 0 else ''}{digits[0]}.{rest}E{e}"


def field_text(doc: Document, name: str):
    """Text of member `name` of doc.data, or None when data is not an object or lacks it."""
    data = doc.data
    if not isinstance(data, dict) or name not in data:
        return None
    return as_text(data[name])


def field_equals(name: str, value: str) -> Predicate:
    def _p(doc: Document) -> bool:
        t = field_text(doc, name)
        return t is not None and t == value
    return _p


def field_contains(name: str, value: str) -> Predicate:
    def _p(doc: Document) -> bool:
        t = field_text(doc, name)
        return t is not None and value in t
    return _p


def scan(docs: Iterable[Document], predicate: Predicate) -> List[Document]:
    return [d for d in docs if predicate(d)]
