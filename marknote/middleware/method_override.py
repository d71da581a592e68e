"""
MarkNote — HTTP Method Override Middleware
===========================================

What:  Lets an HTML form reach the PATCH/PUT/DELETE routes.
Why:   Browsers only submit forms with GET or POST, while update and destroy
       are routed on PATCH/PUT and DELETE.
How:   A POST whose query string carries `_method=PATCH|PUT|DELETE` has its
       scope method rewritten before routing:

           <form method="post" action="/notes/{id}?_method=DELETE">

       The override is read from the query string, not the body, so the form
       body stays unread for the route handler.
"""

import logging
from urllib.parse import parse_qs

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

OVERRIDE_PARAM = "_method"
ALLOWED_OVERRIDES = {"PATCH", "PUT", "DELETE"}


class MethodOverrideMiddleware(BaseHTTPMiddleware):
    """Rewrites `POST ?_method=X` to method X for X in ALLOWED_OVERRIDES."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "POST":
            query = parse_qs(request.scope.get("query_string", b"").decode("latin-1"))
            override = query.get(OVERRIDE_PARAM, [""])[0].upper()
            if override in ALLOWED_OVERRIDES:
                logger.debug("Method override: POST → %s %s", override, request.url.path)
                request.scope["method"] = override
            elif override:
                logger.debug("Ignoring unsupported method override %r", override)

        return await call_next(request)
