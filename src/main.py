"""
Entry point

Run locally:
uvicorn src.main:app --reload
"""

import logging

from src.api.routes import create_app

logging.basicConfig(level=logging.INFO)

app = create_app()
