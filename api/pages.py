"""
Jinja2 page rendering for the scheduling and payment routes.

Templates live in api/templates and extend base.html. Autoescaping is on for
.html templates, so values taken from query strings are safe to interpolate.
"""

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render_page(
    request: Request, name: str, status_code: int = 200, **context: Any
) -> Response:
    """
    Render one of the page templates.

    Args:
        request: Current request (required by the template response)
        name: Template file name, e.g. "checkout.html"
        status_code: HTTP status of the response
        **context: Template variables
    """
    return templates.TemplateResponse(
        request, name, context, status_code=status_code
    )
