import asyncio
import logging

from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

import page_builder
import resolver
from config import Settings
from errors import MalformedError, NotFoundError, StorageError
from project_info import load_markdown, load_project_info
from project_tree import load_project_tree


logger = logging.getLogger("showcase.projects")


def internal_error() -> Response:
    return PlainTextResponse("Internal Server Error", status_code=500)


async def render_showcase(request_path: str, settings: Settings) -> Response:
    """
    Full path in (e.g. "/projects/game_design/convoy/"), response out.
    Nothing is cached: the tree, metadata and template are read per request.
    """
    try:
        tree = await asyncio.to_thread(load_project_tree, settings.project_tree_path)
    except (MalformedError, StorageError) as e:
        logger.error("Failed to load project structure: %s", e)
        return internal_error()

    res = resolver.resolve(tree, request_path, settings.showcase_prefix)

    if res.state == resolver.ROOT:
        html = await asyncio.to_thread(
            page_builder.build_list_page,
            tree,
            request_path,
            res.request_rel,
            settings.template_path,
            settings.showcase_prefix,
        )
        return HTMLResponse(html)

    if res.state == resolver.NO_MATCH:
        return PlainTextResponse("Project Not Found", status_code=404)

    if res.state == resolver.NOT_FOUND:
        return PlainTextResponse("Not Found", status_code=404)

    if res.state == resolver.REDIRECT:
        # 308 keeps the method
        return RedirectResponse(res.location, status_code=308)

    try:
        info = await asyncio.to_thread(load_project_info, settings.project_data_dir, res.project_rel)
    except NotFoundError as e:
        logger.info("Project info not found for %r: %s", res.project_rel, e)
        return PlainTextResponse("Project Not Found", status_code=404)
    except (MalformedError, StorageError) as e:
        logger.error("Project info unreadable for %r: %s", res.project_rel, e)
        return internal_error()

    try:
        md_text = await asyncio.to_thread(
            load_markdown, settings.project_data_dir, res.project_rel, info.content_path
        )
    except StorageError as e:
        logger.warning("Markdown load error: %s. At path: %s", e, info.content_path)
        md_text = ""

    html = await asyncio.to_thread(
        page_builder.build_project_page,
        tree,
        request_path,
        res.request_rel,
        info,
        md_text,
        settings.template_path,
        settings.showcase_prefix,
    )
    return HTMLResponse(html)
