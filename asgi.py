"""
asgi.py -- Application assembly for the lab site.

Joins the JSON API with the public website's static files so a single
process serves both, the way the site has always been deployed. api/main.py
knows nothing about the static directory.

Run with:  uvicorn asgi:app --reload
           python main.py serve
"""

import logging
from pathlib import Path

from fastapi.staticfiles import StaticFiles

from api.main import app
from core.config import get_settings

logger = logging.getLogger("labsite.api")

_static_dir = Path(get_settings().static_dir)

# Mounted last and at "/" so every /api route registered in api/main.py still
# matches first.
if _static_dir.is_dir():
    app.mount("/", StaticFiles(directory=_static_dir, html=True), name="site")
    logger.info("Serving static site from %s", _static_dir.resolve())
