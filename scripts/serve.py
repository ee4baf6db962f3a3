#!/usr/bin/env python
"""Run the A/B testing HTTP server."""

import argparse
import sys

import uvicorn
from loguru import logger

from src.api.config import get_api_settings


def main():
    """Parse arguments and serve the API."""
    api_settings = get_api_settings()

    parser = argparse.ArgumentParser(description="Serve the A/B testing API")
    parser.add_argument("--debug", action="store_true", help="Enable debugging")
    parser.add_argument("--version", action="store_true", help="Print version and stop")
    parser.add_argument("--host", default=api_settings.host, help="Bind address")
    parser.add_argument("--port", type=int, default=api_settings.port, help="HTTP port")
    args = parser.parse_args()

    if args.version:
        print(f"Version: {api_settings.api_version}\nBuild on {api_settings.build_date}")
        sys.exit(0)

    # Imported late so --version does not build the app
    from src.api.main import app, configure_logging

    configure_logging(debug=args.debug or api_settings.debug)

    logger.info(f"HTTP server serving at {args.host}:{args.port}")
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="debug" if args.debug else "info",
        timeout_keep_alive=15,
    )


if __name__ == "__main__":
    main()
