"""Main application entry point.

Runs FastAPI (port 8000) with NiceGUI mounted for the chat interface, or
both as separate processes when RUN_MODE=separate.
Environment variables are loaded from .env file.
"""

import logging
import os
import subprocess
import sys
import time
from collections.abc import Mapping

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Run FastAPI with NiceGUI mounted on the same server.

    FastAPI handles API routes, NiceGUI handles the UI.
    Both accessible on port 8000.
    """
    import uvicorn
    from nicegui import ui

    from chatbot.api.app import create_app
    from chatbot.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title="AI Chatbot",
        favicon="🤖",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "ai-chatbot-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting integrated server on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")
    logger.info(f"Chat UI available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def separate_commands(
    env: Mapping[str, str],
) -> tuple[list[str], list[str], dict[str, str]]:
    """Build the API and UI commands for separate mode.

    The API listens on ``HOST``/``PORT``. The UI listens on ``UI_PORT`` and
    gets ``API_BASE_URL`` pointing at the API process started next to it.

    Returns:
        The API command, the UI command and the UI process environment.
    """
    host = env.get("HOST", "0.0.0.0")
    api_port = env.get("PORT", "8000")
    api_cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "chatbot.api.app:app",
        "--host",
        host,
        "--port",
        api_port,
    ]
    ui_cmd = [sys.executable, "-c", "from chatbot.ui.chat_page import main; main()"]
    ui_env = {
        **env,
        "API_BASE_URL": f"http://localhost:{api_port}",
        "UI_PORT": env.get("UI_PORT", "8080"),
    }
    return api_cmd, ui_cmd, ui_env


def run_separate() -> None:
    """Run FastAPI and NiceGUI as separate servers.

    FastAPI on ``PORT`` (8000), NiceGUI on ``UI_PORT`` (8080).
    Useful for development or when you need separate scaling.
    """
    api_cmd, ui_cmd, ui_env = separate_commands(os.environ)
    logger.info(f"Starting FastAPI on {ui_env['API_BASE_URL']}")
    logger.info(f"Starting NiceGUI on http://localhost:{ui_env['UI_PORT']}")

    fastapi_proc = subprocess.Popen(api_cmd)
    nicegui_proc = subprocess.Popen(ui_cmd, env=ui_env)

    try:
        while fastapi_proc.poll() is None and nicegui_proc.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        fastapi_proc.terminate()
        nicegui_proc.terminate()
        fastapi_proc.wait()
        nicegui_proc.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run FastAPI and NiceGUI on different ports.
    Default is integrated mode (both on PORT, 8000).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting AI Chatbot in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
