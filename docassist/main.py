"""Application entry point.

Serves the API routes and the NiceGUI chat page from a single uvicorn
process. Reads HOST, PORT and LOG_LEVEL from the environment (a .env file
is honored). API_BASE_URL, which the chat page uses to reach the API,
defaults to this same server.
"""

import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def serve(host: str, port: int) -> None:
    """Mount the chat page on the API app and run it.

    Args:
        host: Interface to bind.
        port: Port to bind; also used for the default API_BASE_URL.
    """
    # Must be set before the chat page module is imported.
    os.environ.setdefault("API_BASE_URL", f"http://localhost:{port}")

    import uvicorn
    from nicegui import ui

    from docassist.api.app import create_app
    from docassist.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(app, title="Document Assistant", favicon="📎")

    logger.info(f"Chat UI on http://{host}:{port}/, API docs at /docs")
    logger.info(f"Chat page calls the API at {os.environ['API_BASE_URL']}")

    uvicorn.run(app, host=host, port=port, log_level=LOG_LEVEL.lower())


def main() -> None:
    """Console entry point (``docassist``)."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    serve(host, port)


if __name__ == "__main__":
    main()
