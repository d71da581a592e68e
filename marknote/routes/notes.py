"""
MarkNote — Notes Route Handlers
================================

What:  The seven note actions (list, show, new, create, edit, update,
       destroy) plus the root redirect.
How:   Each handler parses the request, calls NoteService, and either
       renders a template or redirects. Handlers are registered from the
       NOTE_ACTIONS dispatch table at the bottom of the module, which is the
       single place mapping method + path → handler.
Who:   Browsers, through the HTML forms in templates/notes/.

Action Contract:
    index    GET     /notes?search=    200 notes/index.html
    new      GET     /notes/new        200 notes/new.html (empty form)
    create   POST    /notes            302 → show | 422 notes/new.html + errors
    show     GET     /notes/{id}       200 notes/show.html | 404
    edit     GET     /notes/{id}/edit  200 notes/edit.html | 404
    update   PATCH   /notes/{id}       302 → show | 422 notes/edit.html + errors | 404
    destroy  DELETE  /notes/{id}       302 → index | 404

    NotFoundError is not caught here; the global handler in main.py renders
    the 404 page. ValidationError IS caught here, because the response is the
    submitted form with its errors, which only the handler can build.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from marknote.database import get_db_session
from marknote.exceptions import ValidationError
from marknote.models.note import TITLE_MAX_LENGTH, Note
from marknote.schemas.note import NoteInput, SearchParams
from marknote.services.note_service import note_service
from marknote.templating import flash, templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

NOTICE_CREATED = "Note was successfully created."
NOTICE_UPDATED = "Note was successfully updated."
NOTICE_DELETED = "Note was successfully deleted."


# ══════════════════════════════════════════════════════════════════════════
# Rendering helpers
# ══════════════════════════════════════════════════════════════════════════

def _redirect(request: Request, route_name: str, **path_params: Any) -> RedirectResponse:
    """302 to a named route (a browser follows it with GET)."""
    url = request.app.url_path_for(route_name, **path_params)
    return RedirectResponse(url=str(url), status_code=302)


def _template(action_name: str) -> str:
    template = _ACTIONS_BY_NAME[action_name].template
    if template is None:
        raise RuntimeError(f"action {action_name!r} does not render a template")
    return template


def _render_form(
    request: Request,
    template_name: str,
    form: NoteInput,
    note: Optional[Note] = None,
    error: Optional[ValidationError] = None,
) -> HTMLResponse:
    """Render the new/edit form; with `error`, respond 422 and show its messages."""
    context = {
        "form": form,
        "note": note,
        "errors": error.errors if error else {},
        "error_summary": error.message if error else None,
        "error_messages": error.full_messages if error else [],
        "title_max_length": TITLE_MAX_LENGTH,
    }
    status_code = 422 if error else 200
    return templates.TemplateResponse(request, template_name, context, status_code=status_code)


# ══════════════════════════════════════════════════════════════════════════
# Handlers
# ══════════════════════════════════════════════════════════════════════════

async def root(request: Request) -> RedirectResponse:
    return _redirect(request, "notes.index")


async def index(
    request: Request,
    search: Optional[str] = Query(default=None, description="Case-insensitive substring filter"),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    """List up to 50 notes, newest first, filtered by `search` when given."""
    params = SearchParams(search=search)
    notes = await note_service.list_notes(db, search=params.term)
    return templates.TemplateResponse(
        request,
        _template("index"),
        {"notes": notes, "search": search or ""},
    )


async def show(
    request: Request,
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    note = await note_service.get_note(db, note_id)
    return templates.TemplateResponse(request, _template("show"), {"note": note})


async def new(request: Request) -> HTMLResponse:
    return _render_form(request, _template("new"), NoteInput())


async def create(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    """
    Create a note from the submitted form.

    Only `title` and `content` are read from the form (NoteInput); anything
    else the client sends, including `id` or timestamps, is dropped.
    """
    form = NoteInput.from_form(await request.form())
    try:
        note = await note_service.create_note(db, form)
    except ValidationError as exc:
        logger.info("Note rejected on create: %s", exc.context.get("fields"))
        return _render_form(request, _template("new"), form, error=exc)

    flash(request, NOTICE_CREATED)
    return _redirect(request, "notes.show", note_id=str(note.id))


async def edit(
    request: Request,
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    note = await note_service.get_note(db, note_id)
    form = NoteInput(title=note.title, content=note.content)
    return _render_form(request, _template("edit"), form, note=note)


async def update(
    request: Request,
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    form = NoteInput.from_form(await request.form())
    try:
        note = await note_service.update_note(db, note_id, form)
    except ValidationError as exc:
        logger.info("Note %s rejected on update: %s", note_id, exc.context.get("fields"))
        note = await note_service.get_note(db, note_id)
        return _render_form(request, _template("edit"), form, note=note, error=exc)

    flash(request, NOTICE_UPDATED)
    return _redirect(request, "notes.show", note_id=str(note.id))


async def destroy(
    request: Request,
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    await note_service.delete_note(db, note_id)
    flash(request, NOTICE_DELETED)
    return _redirect(request, "notes.index")


# ══════════════════════════════════════════════════════════════════════════
# Dispatch Table
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class NoteAction:
    """One row of the dispatch table."""
    name: str
    methods: Tuple[str, ...]
    path: str
    endpoint: Callable[..., Any]
    # Template rendered on success, or None when the action redirects.
    template: Optional[str] = None


# Order matters: /notes/new must be registered before /notes/{note_id}.
NOTE_ACTIONS: Sequence[NoteAction] = (
    NoteAction("root", ("GET",), "/", root),
    NoteAction("index", ("GET",), "/notes", index, "notes/index.html"),
    NoteAction("new", ("GET",), "/notes/new", new, "notes/new.html"),
    NoteAction("create", ("POST",), "/notes", create),
    NoteAction("show", ("GET",), "/notes/{note_id}", show, "notes/show.html"),
    NoteAction("edit", ("GET",), "/notes/{note_id}/edit", edit, "notes/edit.html"),
    NoteAction("update", ("PATCH", "PUT"), "/notes/{note_id}", update),
    NoteAction("destroy", ("DELETE",), "/notes/{note_id}", destroy),
)

_ACTIONS_BY_NAME = {action.name: action for action in NOTE_ACTIONS}

for action in NOTE_ACTIONS:
    router.add_api_route(
        action.path,
        action.endpoint,
        methods=list(action.methods),
        name=f"notes.{action.name}",
        response_class=HTMLResponse,
        include_in_schema=False,
    )
