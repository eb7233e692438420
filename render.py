from pathlib import Path
from typing import Any, Mapping, Optional, Union

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

HTML_CONTENT_TYPE = "text/html; charset=UTF-8"


class Renderer:
    """Fills templates from the views directory with HTML-escaped values.

    Starlette builds the Jinja2 environment with autoescaping on, so
    interpolated values are escaped unless a template marks them ``|safe``.
    """

    def __init__(self, views_dir: Union[str, Path]):
        self.views_dir = Path(views_dir)
        self.templates = Jinja2Templates(directory=str(self.views_dir))

    def render(
        self,
        request: Request,
        name: str,
        context: Optional[Mapping[str, Any]] = None,
        status_code: int = 200,
    ) -> HTMLResponse:
        response = self.templates.TemplateResponse(
            request,
            name,
            dict(context or {}),
            status_code=status_code,
        )
        response.headers["content-type"] = HTML_CONTENT_TYPE
        return response
