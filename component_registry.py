import asyncio
import json
import logging
import os
import stat
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

from fastapi.responses import FileResponse, Response
from jsonschema import ValidationError, validate

from component_handlers import ComponentHandler, SimpleTemplateComponent, respond_status


logger = logging.getLogger("showcase.components")

ARGS_FIELD = "compArgs"

COMPONENT_PAYLOAD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        ARGS_FIELD: {"type": "array", "items": {"type": "string"}},
    },
}

CONTENT_TYPES = {
    "html": "text/html; charset=utf-8",
    "htm": "text/html; charset=utf-8",
    "css": "text/css; charset=utf-8",
    "js": "application/javascript; charset=utf-8",
    "json": "application/json; charset=utf-8",
    "svg": "image/svg+xml",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "wasm": "application/wasm",
    "txt": "text/plain; charset=utf-8",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


# -------------------------
# Helpers
# -------------------------
def guess_content_type(path: str) -> str:
    ext = os.path.splitext(path)[1].lstrip(".")
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def looks_like_file(sub_path: str) -> bool:
    last = sub_path.rsplit("/", 1)[-1]
    return "." in last


def parse_args_from_body(body: bytes) -> List[str]:
    """Empty or unusable bodies give no args; they are never rejected."""
    if not body:
        return []
    try:
        payload = json.loads(body)
        validate(instance=payload, schema=COMPONENT_PAYLOAD_SCHEMA)
    except (ValueError, RecursionError, ValidationError):
        return []
    return list(payload.get(ARGS_FIELD) or [])


def parse_args_from_query(query: str) -> List[str]:
    # compArgs=msg,url
    for pair in (query or "").split("&"):
        key, _, value = pair.partition("=")
        if key == ARGS_FIELD:
            return [s.strip() for s in unquote(value).split(",") if s.strip()]
    return []


def _read_file(path: str) -> Optional[bytes]:
    if not os.path.isfile(path):
        return None
    with open(path, "rb") as f:
        return f.read()


# -------------------------
# Registry
# -------------------------
class ComponentRegistry:
    """
    name -> handler, filled once at startup and only read afterwards.
    Everything under `root` that is not a component is served as a file.
    """

    def __init__(self, root: str = "components"):
        self.root = root
        self._handlers: Dict[str, ComponentHandler] = {}

    def register(self, handler: ComponentHandler) -> None:
        self._handlers[handler.name] = handler

    def register_static(self, file_path: str) -> ComponentHandler:
        """
        Route name is the file stem:
        "components/underConstruction.html" -> "underConstruction"
        """
        stem = os.path.splitext(os.path.basename(file_path))[0]
        if not stem:
            raise ValueError(f"could not derive component name from path {file_path!r}")
        handler = SimpleTemplateComponent(stem, file_path)
        self.register(handler)
        return handler

    def get(self, name: str) -> Optional[ComponentHandler]:
        return self._handlers.get(name)

    def names(self) -> List[str]:
        return sorted(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    # -------------------------
    # Dispatch
    # -------------------------
    async def dispatch(self, sub_path: str, method: str, body: bytes = b"", query: str = "") -> Response:
        sub_path = (sub_path or "").lstrip("/")

        if sub_path and not looks_like_file(sub_path):
            name = sub_path.split("/", 1)[0]
            handler = self._handlers.get(name)
            if handler is not None:
                return await self.process_component(handler, method, body, query)

        return await self.serve_static(sub_path)

    async def resolve_template(self, name: str) -> Optional[str]:
        candidates = [
            os.path.join(self.root, name, "template.html"),
            os.path.join(self.root, f"{name}.html"),
        ]
        for path in candidates:
            try:
                data = await asyncio.to_thread(_read_file, path)
            except OSError as e:
                logger.warning("Unreadable template %r: %s", path, e)
                continue
            if data is not None:
                return data.decode("utf-8", errors="replace")
        return None

    async def process_component(self, handler: ComponentHandler, method: str, body: bytes, query: str) -> Response:
        template = await self.resolve_template(handler.name)

        if method.upper() == "POST":
            args = parse_args_from_body(body)
        else:
            args = parse_args_from_query(query)

        return await handler.parse(template, args)

    async def serve_static(self, rel_path: str) -> Response:
        if any(seg == ".." for seg in rel_path.split("/")):
            return respond_status(403, "403 Forbidden: invalid path")

        target = os.path.join(self.root, rel_path) if rel_path else os.path.join(self.root, "index.html")
        if await asyncio.to_thread(os.path.isdir, target):
            target = os.path.join(target, "index.html")

        try:
            st = await asyncio.to_thread(os.stat, target)
        except (FileNotFoundError, NotADirectoryError):
            return respond_status(404, "404 Not Found")
        except OSError as e:
            logger.error("Failed to stat %r: %s", target, e)
            return respond_status(500, "Internal Server Error")

        if not stat.S_ISREG(st.st_mode):
            return respond_status(404, "404 Not Found")
        return FileResponse(target, media_type=guess_content_type(target), stat_result=st)
