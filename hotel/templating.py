"""Jinja2 template wiring shared by the routers."""
from pathlib import Path
from typing import Any, Dict

from fastapi import Request
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def current_user_context(request: Request) -> Dict[str, Any]:
    return {"current_user": getattr(request.state, "user", None)}


templates = Jinja2Templates(directory=str(TEMPLATES_DIR), context_processors=[current_user_context])
