"""
FastAPI/ASGI application entrypoint.

Wires settings, logging, RPC client, store, dedup tracker and scan engine,
then builds the app from server.create_app.
Run with: uvicorn --factory backend_txparser.api_server.app:build_app --host 0.0.0.0 --port 8088
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend_txparser.api_server.server import create_app
from backend_txparser.config import Settings, load_settings
from backend_txparser.parser.engine import ScanEngine
from backend_txparser.rpc_client.client import EthRpcClient
from backend_txparser.storage import DedupTracker, TransactionStore
from backend_txparser.txparser_logging import configure_logging, get_logger


def build_app(settings: Settings | None = None) -> FastAPI:
    """Construct every component explicitly and return the ASGI app."""
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_format)

    rpc_client = EthRpcClient(
        settings.eth_rpc_url,
        timeout_sec=settings.rpc_timeout_sec,
        logger=get_logger("backend_txparser.rpc_client"),
    )
    store = TransactionStore()
    dedup = DedupTracker()
    engine = ScanEngine(
        rpc_client,
        store,
        dedup,
        logger=get_logger("backend_txparser.parser"),
    )
    api_logger = get_logger("backend_txparser.api_server")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        api_logger.info(
            "api_started",
            rpc_url=rpc_client.rpc_url,
            initial_cursor=engine.cursor,
        )
        yield
        rpc_client.close()
        stats = engine.stats
        api_logger.info(
            "api_stopped",
            scans=stats.scans,
            blocks_scanned=stats.blocks_scanned,
            blocks_skipped=stats.blocks_skipped,
            records_persisted=stats.records_persisted,
        )

    return create_app(engine, store, logger=api_logger, lifespan=lifespan)


__all__ = ["build_app"]
