"""
Storefront entry point.

Serves the HTTP API with uvicorn, or runs the offline console demo.

Usage:
    API server:   python main.py serve
    Console demo: python main.py demo [--scenario checkout|favorites|conflict]
"""

import argparse
import asyncio
import logging

from storefront.config import settings

logger = logging.getLogger(__name__)


def _run_server() -> None:
    """Start the API server with the configured store backend."""
    import uvicorn

    from storefront.api.app import create_app

    logger.info(
        "Serving %s on %s:%d%s", settings.app_name, settings.api.host, settings.api.port,
        settings.api.path_prefix,
    )
    uvicorn.run(
        create_app(),
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.log_level.lower(),
    )


def _run_demo(scenario: str) -> None:
    """Start the offline console demo (no server, no network)."""
    from console_demo import ShoppingSession

    asyncio.run(ShoppingSession().run_scenario(scenario))


def main() -> None:
    parser = argparse.ArgumentParser(description="Adventure storefront")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="Run the HTTP API")
    demo = sub.add_parser("demo", help="Run a scripted shopping session offline")
    demo.add_argument("--scenario", default="checkout", choices=["checkout", "favorites", "conflict"])
    args = parser.parse_args()

    if args.command == "demo":
        _run_demo(args.scenario)
    else:
        _run_server()


if __name__ == "__main__":
    main()
