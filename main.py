"""
Main entrypoint: FastAPI server for the transaction parser.

Loads settings (CONFIG_PATH or configs/config.yaml, then env overrides),
configures logging, builds the scan engine and serves the API with uvicorn
in the main thread. No background worker: scans run inside requests.

Env: CONFIG_PATH, ETH_RPC_URL, API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT, RPC_TIMEOUT_SEC.
"""

import sys

import uvicorn

from backend_txparser.config import load_settings
from backend_txparser.core.exceptions import ConfigurationError
from backend_txparser.txparser_logging import configure_logging, get_logger
from backend_txparser.txparser_logging.logger import level_name


def main() -> None:
    """Load config, build the app and run uvicorn until SIGINT/SIGTERM."""
    configure_logging()
    logger = get_logger("main")
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error("main_config_error", error=str(e))
        sys.exit(1)

    from backend_txparser.api_server.app import build_app

    app = build_app(settings)
    logger.info(
        "main_server_starting",
        host=settings.host,
        port=settings.port,
        rpc_url=settings.eth_rpc_url,
    )
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=level_name(settings.log_level),
    )


if __name__ == "__main__":
    main()
