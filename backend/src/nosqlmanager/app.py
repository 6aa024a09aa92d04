# backend/src/nosqlmanager/app.py
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nosqlmanager.config import StoreConfig
from nosqlmanager.manager import DatabaseManager
from nosqlmanager.routes import Session, router as api_router


def create_app(config: Optional[StoreConfig] = None) -> FastAPI:
    app = FastAPI(title="NoSQL Manager AVL", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.session = Session(DatabaseManager(config or StoreConfig()))
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
