#!/usr/bin/env python
"""Run the relay API server.

Usage:
    python -m scripts.serve --port 3001

Host and port default to API_HOST and API_PORT from the environment.
"""

import argparse
import errno
import socket
import sys

import uvicorn

from aiflow.config import get_settings
from aiflow.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def port_in_use(host: str, port: int) -> bool:
    """Check whether the port can be bound."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                return True
            raise
    return False


def main() -> None:
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Run the AIFlow relay API server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--host", default=settings.api_host, help="Bind address")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args()
    setup_logging(level=settings.log_level)

    if port_in_use(args.host, args.port):
        logger.error(f"Port {args.port} is already in use")
        print(f"\nPort {args.port} is already in use. Try one of these:")
        print(f"1. Stop the process using port {args.port}")
        print(f"2. Use a different port: API_PORT={args.port + 1} python -m scripts.serve")
        print("3. Wait a few seconds for the port to be released\n")
        sys.exit(1)

    logger.info(f"Server running on port {args.port}")
    logger.info(f"Health check: http://localhost:{args.port}/health")

    uvicorn.run(
        "aiflow.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
