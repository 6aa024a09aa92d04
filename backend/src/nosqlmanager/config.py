# backend/src/nosqlmanager/config.py
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator

DEFAULT_FILE_PATH = "database.json"


class StoreConfig(BaseModel):
    file_path: str = Field(DEFAULT_FILE_PATH, description="Ruta del archivo JSON espejo del índice")

    @field_validator("file_path")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("file_path no puede estar vacío")
        return v
