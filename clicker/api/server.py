"""
Judge Clicker: Share Server
===========================

Stores published recordings and looks them up by share hash.

Endpoints:
- GET  /health                    -> Status
- POST /api/v1/scores             -> Publish a document, returns its hash
- GET  /api/v1/scores?hash=<id>   -> Zero or one matching documents
- GET  /api/v1/scores/{hash}      -> One document or 404

Usage:
    uvicorn clicker.api.server:app --reload
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..config import ClickerConfig
from ..contracts.base import ValidationError
from ..transfer.codec import validate_document
from ..transfer.remote import FileRemoteStore, InMemoryRemoteStore, RemoteStore


logger = logging.getLogger("clicker.api")


class ShareReceipt(BaseModel):
    hash: str


class ScoreList(BaseModel):
    scores: List[Dict[str, Any]]


def _store_from_config(config: ClickerConfig) -> RemoteStore:
    if config.share_store_dir is not None:
        logger.info("Share store at %s", config.share_store_dir)
        return FileRemoteStore(config.share_store_dir)
    logger.info("Share store in memory (set CLICKER_STORE_DIR to persist)")
    return InMemoryRemoteStore()


def create_app(
    store: Optional[RemoteStore] = None,
    config: Optional[ClickerConfig] = None
) -> FastAPI:
    """Build the share server. Without a store, one is chosen from config."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = config or ClickerConfig.from_env()
        app.state.config = cfg
        app.state.store = store if store is not None else _store_from_config(cfg)
        yield
        logger.info("Shutting down share store")
        app.state.store = None

    app = FastAPI(
        title="Judge Clicker Share API",
        version="0.1.0",
        description="Publish and look up judge recordings by share hash",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    def get_store(request: Request) -> RemoteStore:
        current = getattr(request.app.state, "store", None)
        if current is None:
            raise HTTPException(status_code=503, detail="Share store not initialized")
        return current

    def lookup(request: Request, share_hash: str):
        try:
            return get_store(request).lookup(share_hash)
        except ValidationError as e:
            logger.error("Stored share %s is corrupt: %s", share_hash, e)
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/health")
    async def health_check(request: Request):
        get_store(request)
        return {"status": "online"}

    @app.post("/api/v1/scores", response_model=ShareReceipt)
    async def publish_score(request: Request, document: Dict[str, Any] = Body(...)):
        cfg = request.app.state.config
        try:
            validate_document(document, judge_name_limit=cfg.judge_name_limit)
        except ValidationError as e:
            logger.info("Rejected document: %s", e)
            raise HTTPException(status_code=422, detail=str(e))

        share_hash = get_store(request).publish(document)
        logger.info("Published share %s", share_hash)
        return ShareReceipt(hash=share_hash)

    @app.get("/api/v1/scores", response_model=ScoreList)
    async def lookup_scores(request: Request, hash: str):
        return ScoreList(scores=lookup(request, hash))

    @app.get("/api/v1/scores/{share_hash}")
    async def get_score(request: Request, share_hash: str):
        matches = lookup(request, share_hash)
        if len(matches) != 1:
            raise HTTPException(status_code=404, detail=f"Unable to find score with ID {share_hash}")
        return matches[0]

    return app


app = create_app()
