from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv

from app import config
from app.main import create_app

# Load .env from backend dir (where server.py runs)
load_dotenv(os.path.join(os.path.dirname(__file__), ".env"))
logging.basicConfig(level=logging.INFO)


def main() -> None:
    app = create_app()
    host, port = config.get_host(), config.get_port()
    logging.info("Listening on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
