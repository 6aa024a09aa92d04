# backend/src/nosqlmanager/routes.py
from __future__ import annotations
import os
import time
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from nosqlmanager.core.document import Document, parse_data, parse_field_query, parse_id
from nosqlmanager.errors import CorruptFile, InvalidArgument, IoFailure, NotFound
from nosqlmanager.events import Cleared, Deleted, Inserted, MutationEvent, Updated
from nosqlmanager.io_counters import get_counters, reset_counters
from nosqlmanager.manager import DatabaseManager

router = APIRouter()


class Session:
    """Active database plus the operation log shown next to the tree view."""

    def __init__(self, manager: DatabaseManager, log_limit: int = 500):
        self.log: List[str] = []
        self.log_limit = log_limit
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.manager = manager
        self.attach(manager)

    def attach(self, manager: DatabaseManager) -> None:
        if self._unsubscribe: self._unsubscribe()
        self.manager = manager
        self._unsubscribe = manager.feed.subscribe(self._on_event)
        self.write_log(f"[INFO] Base de datos cargada: {manager.size()} documentos")
        if manager.load_error is not None:
            self.write_log(f"[ERROR] Archivo descartado: {manager.load_error}")

    def _on_event(self, ev: MutationEvent) -> None:
        if isinstance(ev, Inserted): self.write_log(f"[INSERT] Documento insertado: {ev.id}")
        elif isinstance(ev, Updated): self.write_log(f"[UPDATE] Documento actualizado: {ev.id}")
        elif isinstance(ev, Deleted): self.write_log(f"[DELETE] Documento eliminado: {ev.id}")
        elif isinstance(ev, Cleared): self.write_log("[CLEAR] Base de datos limpiada")

    def write_log(self, msg: str) -> None:
        self.log.append(msg)
        if len(self.log) > self.log_limit:
            del self.log[: len(self.log) - self.log_limit]


def get_session(request: Request) -> Session:
    return request.app.state.session


class DocumentIn(BaseModel):
    id: str = Field(..., description="ID entero, como texto del formulario")
    data: str = Field("", description="JSON del documento; vacío = {}")

class DataIn(BaseModel):
    data: str = Field("", description="JSON del documento; vacío = {}")

class PathIn(BaseModel):
    path: str


# Helpers
def _doc_out(doc: Document) -> Dict[str, Any]:
    return doc.to_dict()

def _run(fn: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    t0 = time.perf_counter()
    try:
        reset_counters()
        result = fn()
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CorruptFile as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IoFailure as e:
        raise HTTPException(status_code=500, detail=str(e))
    result["_elapsed_ms"] = round((time.perf_counter() - t0) * 1000, 2)
    result["metrics"] = get_counters()
    return result


# Endpoints
@router.get("/status")
def status(s: Session = Depends(get_session)):
    m = s.manager
    return {"file_path": m.file_path, "size": m.size(), "height": m.index.height(),
            "empty": m.is_empty(), "mirror": m.file.stats.as_dict()}


@router.get("/documents")
def list_documents(s: Session = Depends(get_session)):
    return _run(lambda: {"rows": [_doc_out(d) for d in s.manager.all_documents()]})


@router.get("/documents/{doc_id}")
def get_document(doc_id: str, s: Session = Depends(get_session)):
    def _do():
        key = parse_id(doc_id)
        doc = s.manager.find_by_id(key)
        if doc is None:
            s.write_log(f"[SEARCH] Documento no encontrado: {key}")
            raise NotFound(f"Documento no encontrado: {key}")
        s.write_log(f"[SEARCH] Documento encontrado: {key}")
        return {"document": _doc_out(doc)}
    return _run(_do)


@router.post("/documents")
def insert_document(req: DocumentIn, s: Session = Depends(get_session)):
    def _do():
        doc = Document(parse_id(req.id), parse_data(req.data))
        s.manager.save(doc)
        return {"document": _doc_out(doc)}
    return _run(_do)


@router.put("/documents/{doc_id}")
def update_document(doc_id: str, req: DataIn, s: Session = Depends(get_session)):
    def _do():
        doc = Document(parse_id(doc_id), parse_data(req.data))
        if not s.manager.update(doc):
            s.write_log(f"[ERROR] No se pudo actualizar, documento no existe: {doc.id}")
            raise NotFound(f"Documento no existe: {doc.id}")
        return {"document": _doc_out(doc)}
    return _run(_do)


@router.delete("/documents/{doc_id}")
def delete_document(doc_id: str, s: Session = Depends(get_session)):
    def _do():
        key = parse_id(doc_id)
        if not s.manager.delete_by_id(key):
            s.write_log(f"[ERROR] No se pudo eliminar, documento no existe: {key}")
            raise NotFound(f"Documento no existe: {key}")
        return {"deleted": key}
    return _run(_do)


@router.post("/clear")
def clear(s: Session = Depends(get_session)):
    def _do():
        s.manager.clear()
        return {"size": 0}
    return _run(_do)


@router.post("/new")
def new_database(s: Session = Depends(get_session)):
    def _do():
        s.manager.clear()
        s.write_log("[INFO] Nueva base de datos creada")
        return {"size": 0}
    return _run(_do)


@router.get("/search")
def search_by_field(q: str, s: Session = Depends(get_session)):
    def _do():
        name, value = parse_field_query(q)
        rows = s.manager.find_by_field_contains(name, value)
        s.write_log(f"[SEARCH] Búsqueda por campo '{name}': {len(rows)} resultados")
        return {"rows": [_doc_out(d) for d in rows]}
    return _run(_do)


@router.get("/search/equals")
def search_by_field_equals(field: str, value: str, s: Session = Depends(get_session)):
    def _do():
        rows = s.manager.find_by_field_equals(field, value)
        s.write_log(f"[SEARCH] Igualdad en campo '{field}': {len(rows)} resultados")
        return {"rows": [_doc_out(d) for d in rows]}
    return _run(_do)


@router.get("/tree")
def tree(s: Session = Depends(get_session)):
    return {"root": s.manager.index_snapshot(), "array": s.manager.index.as_array(),
            "size": s.manager.size()}


@router.post("/open")
def open_database(req: PathIn, s: Session = Depends(get_session)):
    def _do():
        manager = DatabaseManager.open(req.path)
        s.attach(manager)
        s.write_log(f"[LOAD] Base de datos cargada desde: {os.path.basename(req.path)}")
        return {"file_path": manager.file_path, "size": manager.size()}
    return _run(_do)


@router.post("/save-as")
def save_as(req: PathIn, s: Session = Depends(get_session)):
    def _do():
        try:
            s.manager.export_to(req.path)
        except IoFailure as e:
            s.write_log(f"[ERROR] Error al guardar: {e}")
            raise
        s.write_log(f"[SAVE] Base de datos guardada en: {os.path.basename(req.path)}")
        return {"path": req.path, "size": s.manager.size()}
    return _run(_do)


@router.get("/log")
def read_log(s: Session = Depends(get_session)):
    return {"log": list(s.log)}
