import asyncio
import logging
import os
import stat
from typing import List, Optional

from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, Response

from markdown_render import escape_html


logger = logging.getLogger("showcase.components")


def respond_status(status_code: int, message: str) -> Response:
    return PlainTextResponse(message, status_code=status_code)


class ComponentHandler:
    """
    A named component. `parse` receives the template resolved for this name
    (or None) plus the request args and returns the full response.
    Handlers are shared between requests and must not mutate themselves.
    """

    name: str = ""

    async def parse(self, template: Optional[str], args: List[str]) -> Response:
        raise NotImplementedError


class PlaceholderComponent(ComponentHandler):
    """Fills {{token}} with the first arg (escaped) or a default."""

    def __init__(self, name: str, token: str, default: str, root: str = "components"):
        self.name = name
        self.token = token
        self.default = default
        self.root = root

    async def parse(self, template: Optional[str], args: List[str]) -> Response:
        value = args[0] if args else self.default

        if template is None:
            expected_a = os.path.join(self.root, f"{self.name}.html")
            expected_b = os.path.join(self.root, self.name, "template.html")
            return respond_status(
                500,
                f"{self.name.capitalize()} template not found: expected {expected_a} (or {expected_b})",
            )

        html = template.replace("{{" + self.token + "}}", escape_html(value))
        return HTMLResponse(html)


def header_component(root: str = "components") -> PlaceholderComponent:
    # Args: [section_heading]
    return PlaceholderComponent("header", "section_heading", "Technical Art", root=root)


class SimpleTemplateComponent(ComponentHandler):
    """No-logic component returning a fixed HTML file."""

    def __init__(self, name: str, path: str):
        self.name = name
        self.path = path

    async def parse(self, template: Optional[str], args: List[str]) -> Response:
        # a template found by name wins over the registered file
        if template is not None:
            return HTMLResponse(template)

        try:
            st = await asyncio.to_thread(os.stat, self.path)
        except FileNotFoundError:
            return respond_status(404, "Component file not found")
        except OSError as e:
            logger.error("Failed to read component file %r: %s", self.path, e)
            return respond_status(500, "Failed to read component file")

        if not stat.S_ISREG(st.st_mode):
            logger.error("Component file %r is not a regular file", self.path)
            return respond_status(500, "Failed to read component file")
        return FileResponse(self.path, media_type="text/html", stat_result=st)
