"""Application entry point: serve a tutorial file with interactive questions."""

from __future__ import annotations

import argparse
from pathlib import Path
import socket
import time

from tutorial_quiz.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from tutorial_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from tutorial_quiz.core.tutorial_manager import TutorialManager
from tutorial_quiz.server.api_server import start_api_server
from tutorial_quiz.utils.logging_config import configure_logging

_SAMPLE_TUTORIAL = Path(__file__).resolve().parent / "tutorial_quiz" / "data" / "sample_tutorial.txt"


def _determine_tutorial_url(port: int) -> str:
    """Best-effort determination of the local IP for the tutorial URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, load the tutorial questions and start the API server."""
    parser = argparse.ArgumentParser(prog=APP_NAME, description=APP_ABOUT_TEXT)
    parser.add_argument("tutorial", nargs="?", type=Path, default=_SAMPLE_TUTORIAL)
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION} ({APP_LICENSE})")
    args = parser.parse_args()

    logger = configure_logging()
    logger.info("Starting tutorial quiz server...")

    manager = TutorialManager()
    manager.load_tutorial(args.tutorial)
    server_thread = start_api_server(tutorial_manager=manager, host=args.host, port=args.port)
    logger.info("Tutorial available at %s", _determine_tutorial_url(args.port))

    try:
        while server_thread.is_alive():
            time.sleep(0.5)
    except KeyboardInterrupt:
        logger.info("Shutting down.")


if __name__ == "__main__":
    main()
