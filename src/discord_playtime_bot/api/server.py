"""
API server runner for subscription administration.
"""

import asyncio
from typing import Optional

import uvicorn

from .app import create_app
from discord_playtime_bot.config import SimpleConfigManager
from discord_playtime_bot.infrastructure import ConfigurationError, setup_logging

logger = setup_logging("api.server")


async def run_api_server(
    host: str = "0.0.0.0",
    port: int = 8000,
    db_path: str = "data/playtime.db",
    api_key: Optional[str] = None,
):
    """
    Run the subscription administration API server.

    Args:
        host: Host to bind to
        port: Port to bind to
        db_path: Path to the subscription database
        api_key: Optional key required in the X-API-Key header
    """
    app = create_app(db_path=db_path, api_key=api_key)

    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    if api_key is None:
        logger.warning("ADMIN_API_KEY is not set, subscription routes are unauthenticated")
    logger.info(f"Starting subscription API server on {host}:{port}")
    await server.serve()


def main():
    """Console script entry point."""
    try:
        config = SimpleConfigManager().get_config()
    except ConfigurationError as e:
        logger.critical(f"Failed to load configuration: {e}")
        raise SystemExit(1)
    logger.setLevel(config.log_level)

    try:
        asyncio.run(
            run_api_server(
                host=config.api_host,
                port=config.api_port,
                db_path=config.db_path,
                api_key=config.admin_api_key,
            )
        )
    except KeyboardInterrupt:
        logger.info("API server shutdown requested")


if __name__ == "__main__":
    main()
