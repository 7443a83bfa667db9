"""Main application entry point.

Serves the assistant API and the NiceGUI chat page. By default both run in
one uvicorn process; set RUN_MODE=separate to run the API on port 8000 and
the chat page on port 8080 (point API_BASE_URL at the API in that case).
"""

import logging
import os
import subprocess
import sys

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
    """Mount the NiceGUI page onto the FastAPI app and serve both."""
    import uvicorn
    from nicegui import ui

    from plantcare.api.app import create_app
    from plantcare.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    port = int(os.getenv("PORT", "8000"))

    ui.run_with(
        app,
        title="Plant Care AI",
        favicon="🌱",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "plant-care-secret"),
    )

    logger.info(f"Chat UI on http://localhost:{port}/, API docs on /docs")
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the API and the chat page as two child processes."""
    host = os.getenv("HOST", "0.0.0.0")
    commands = [
        [sys.executable, "-m", "uvicorn", "plantcare.api.app:app", "--host", host, "--port", "8000"],
        [sys.executable, "-c", "from plantcare.ui.chat_page import main; main()"],
    ]
    logger.info("Starting API on http://localhost:8000 and chat UI on http://localhost:8080")

    processes = [subprocess.Popen(command) for command in commands]
    try:
        processes[0].wait()
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for process in processes:
            process.terminate()
            process.wait()


def main() -> None:
    """Application entry point. RUN_MODE selects integrated or separate."""
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting Plant Care AI in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
