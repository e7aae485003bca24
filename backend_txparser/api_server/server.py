"""
FastAPI server — HTTP adapter over the scan engine.

Exposes POST /subscribe, GET /current-block and GET /transactions/{address}.
Endpoints are plain (sync) functions, so FastAPI runs each request on its own
worker thread; a transactions query blocks its worker for the whole scan.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from backend_txparser import __version__
from backend_txparser.parser.engine import ScanEngine
from backend_txparser.storage.memory_storage import TransactionStore
from backend_txparser.txparser_logging import get_logger
from backend_txparser.utils.address_utils import normalize_address

MSG_ADDRESS_REQUIRED = "Address is required"
MSG_ALREADY_SUBSCRIBED = "Address already subscribed"
MSG_NOT_SUBSCRIBED = "Address is not subscribed"
MSG_NO_TRANSACTIONS = "No transactions found for the given address"


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------

class SubscribeRequest(BaseModel):
    """POST /subscribe body."""

    address: str = Field(..., max_length=128, description="Account address (0x-prefixed hex)")


class StatusResponse(BaseModel):
    status: str
    message: str | None = None


class CurrentBlockResponse(BaseModel):
    """GET /current-block response."""

    current_block: int = Field(..., ge=0, description="Latest known chain height")


class TransactionResponse(BaseModel):
    """One element of GET /transactions/{address}."""

    hash: str
    from_: str = Field(..., alias="from")
    to: str
    value: str
    incoming: bool


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------

def get_engine(request: Request) -> ScanEngine:
    return request.app.state.engine


def get_store(request: Request) -> TransactionStore:
    return request.app.state.store


def get_request_logger(request: Request) -> structlog.BoundLogger:
    return request.app.state.logger


# -----------------------------------------------------------------------------
# App factory and routes
# -----------------------------------------------------------------------------

def create_app(
    engine: ScanEngine,
    store: TransactionStore,
    *,
    logger: structlog.BoundLogger | None = None,
    lifespan: Any = None,
) -> FastAPI:
    """Build the FastAPI app around an already constructed engine and store."""
    app = FastAPI(
        title="Backend TxParser API",
        description="Subscribe Ethereum addresses and query their incoming/outgoing transactions.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.store = store
    app.state.logger = logger or get_logger(__name__)

    @app.post("/subscribe", response_model=StatusResponse)
    def subscribe(
        body: SubscribeRequest,
        engine: ScanEngine = Depends(get_engine),
        log: structlog.BoundLogger = Depends(get_request_logger),
    ) -> JSONResponse:
        """
        Subscribe an address. 200 when newly subscribed, 409 when already subscribed.
        Addresses are compared case- and whitespace-insensitively.
        """
        if not normalize_address(body.address):
            return JSONResponse(
                status_code=400,
                content={"status": "error", "message": MSG_ADDRESS_REQUIRED},
            )
        if engine.subscribe(body.address):
            log.info("api_subscribe_success", address=normalize_address(body.address))
            return JSONResponse(status_code=200, content={"status": "success"})
        log.warning("api_subscribe_conflict", address=normalize_address(body.address))
        return JSONResponse(
            status_code=409,
            content={"status": "error", "message": MSG_ALREADY_SUBSCRIBED},
        )

    @app.get("/current-block", response_model=CurrentBlockResponse)
    def current_block(
        engine: ScanEngine = Depends(get_engine),
        log: structlog.BoundLogger = Depends(get_request_logger),
    ) -> CurrentBlockResponse:
        """Latest chain height; stale value when the node is unreachable."""
        block = engine.get_current_block()
        log.debug("api_current_block", current_block=block)
        return CurrentBlockResponse(current_block=block)

    @app.get("/transactions/")
    def transactions_missing_address() -> PlainTextResponse:
        return PlainTextResponse(MSG_ADDRESS_REQUIRED, status_code=400)

    @app.get("/transactions/{address}", response_model=list[TransactionResponse])
    def transactions(
        address: str,
        engine: ScanEngine = Depends(get_engine),
        store: TransactionStore = Depends(get_store),
        log: structlog.BoundLogger = Depends(get_request_logger),
    ) -> Any:
        """
        Scan new blocks for the address, then return its full recorded log.

        404 (plain text) when the address was never subscribed or has no
        recorded transactions yet; the two cases carry different messages.
        """
        key = normalize_address(address)
        if not key:
            return PlainTextResponse(MSG_ADDRESS_REQUIRED, status_code=400)
        if not store.is_subscribed(key):
            log.info("api_transactions_not_subscribed", address=key)
            return PlainTextResponse(MSG_NOT_SUBSCRIBED, status_code=404)

        new_matches = engine.get_transactions(key)
        if new_matches is None:
            log.warning("api_transactions_scan_unavailable", address=key)

        recorded = store.get_transactions(key)
        if not recorded:
            return PlainTextResponse(MSG_NO_TRANSACTIONS, status_code=404)
        log.info(
            "api_transactions_served",
            address=key,
            new_matches=len(new_matches) if new_matches is not None else None,
            total=len(recorded),
        )
        return JSONResponse(status_code=200, content=[tx.to_dict() for tx in recorded])

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    return app
