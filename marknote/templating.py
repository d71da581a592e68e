"""
MarkNote — Template Rendering & Flash Notices
==============================================

What:  The shared Jinja2Templates instance, its filters/globals, and the
       flash-notice helpers.
How:   Templates live in marknote/templates; route handlers call
       `templates.TemplateResponse(request, name, context)`.
       Flash notices ride in the signed session cookie (Starlette
       SessionMiddleware) from the redirecting request to the next page
       rendered, where `get_flashed_messages` pops them.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from fastapi.templating import Jinja2Templates
from starlette.requests import Request

from marknote.config import settings
from marknote.services.markdown_service import markdown_service

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

_FLASH_KEY = "_flashes"


def flash(request: Request, message: str, category: str = "notice") -> None:
    """Queue `message` for display on the next rendered page."""
    # Assign, never mutate in place: only item assignment marks the session dirty.
    messages = list(request.session.get(_FLASH_KEY, []))
    messages.append({"category": category, "message": message})
    request.session[_FLASH_KEY] = messages


def get_flashed_messages(request: Request) -> List[dict]:
    """Return and clear the queued notices."""
    if "session" not in request.scope:
        return []
    return request.session.pop(_FLASH_KEY, [])


def format_datetime(value: Optional[datetime], fmt: str = "%Y-%m-%d %H:%M") -> str:
    if value is None:
        return ""
    return value.strftime(fmt)


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["markdown"] = markdown_service.to_markup
templates.env.filters["datetime"] = format_datetime
templates.env.globals["get_flashed_messages"] = get_flashed_messages
templates.env.globals["preview_length"] = settings.preview_length
