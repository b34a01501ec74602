"""
Entry point for the Gourmet Chef API

Runs the FastAPI app with uvicorn. Configuration comes from the environment
or a .env file (see config/settings.py).
"""

import logging

import logfire
from dotenv import load_dotenv

# Load environment variables (LOGFIRE_TOKEN is read by logfire itself)
load_dotenv()

from api import create_app
from config.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logfire.configure(send_to_logfire="if-token-present")

app = create_app(settings)


if __name__ == "__main__":
    print("🍳 Starting Gourmet Chef API...")

    import uvicorn

    # Single worker: storage writes are not synchronized across processes
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        workers=1,
        log_level=settings.log_level.lower()
    )
