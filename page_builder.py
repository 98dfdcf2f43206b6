import logging
import re
from typing import List

from markdown_render import escape_html, render_markdown
from project_info import ProjectInfo
from project_tree import NavNode, ProjectTree
from resolver import strip_prefix


logger = logging.getLogger("showcase.pages")

LIST_PAGE_TITLE = "Projects"
SHOWCASE_PREFIX = "/projects"

# Hook into the client-side transition manager
LINK_ONCLICK = "return tm.handleLinkClick(event, this)"

TEMPLATE_TOKEN_RE = re.compile(r"\{\{(TITLE|SIDEBAR|CONTENT)\}\}")

FALLBACK_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{TITLE}}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <style>/* minimal fallback */</style>
</head>
<body>
  <div class="root">
    <div class="sidebar">{{SIDEBAR}}</div>
    <div class="content">{{CONTENT}}</div>
  </div>
</body>
</html>"""


# -------------------------
# Template
# -------------------------
def load_template(template_path: str) -> str:
    try:
        with open(template_path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read template at %r: %s. Using built-in fallback.", template_path, e)
        return FALLBACK_TEMPLATE


def apply_template(template: str, title: str, sidebar_html: str, content_html: str) -> str:
    """Single pass: substituted values are never scanned for tokens again."""
    values = {
        "TITLE": escape_html(title),
        "SIDEBAR": sidebar_html,
        "CONTENT": content_html,
    }
    return TEMPLATE_TOKEN_RE.sub(lambda m: values[m.group(1)], template)


# -------------------------
# Sidebar
# -------------------------
def is_selected(req_path: str, req_rel: str, node_path: str, prefix: str = SHOWCASE_PREFIX) -> bool:
    req_path_norm = req_path.rstrip("/")
    node_norm = node_path.rstrip("/")
    if req_path_norm == node_norm:
        return True
    return req_rel.strip("/") == strip_prefix(node_norm, prefix).strip("/")


def render_node(node: NavNode, req_path: str, req_rel: str, depth: int, out: List[str], prefix: str) -> None:
    has_children = bool(node.children)
    li_class = "project-node has-children" if has_children else "project-node"
    a_class = "project-link selected" if is_selected(req_path, req_rel, node.path, prefix) else "project-link"

    # trailing slash so relative URLs inside the page resolve under the project
    href = escape_html(node.path.rstrip("/") + "/")

    out.append(f'<li class="{li_class}">')
    out.append(f'<a class="{a_class}" href="{href}" onclick="{LINK_ONCLICK}">{escape_html(node.name)}</a>')
    if has_children:
        out.append(f'<ul class="project-list level-{depth + 1}">')
        for child in node.children:
            render_node(child, req_path, req_rel, depth + 1, out, prefix)
        out.append("</ul>")
    out.append("</li>")


def render_sidebar(tree: ProjectTree, req_path: str, req_rel: str, prefix: str = SHOWCASE_PREFIX) -> str:
    out = ['<nav class="sidebar-nav">', '<ul class="project-list level-0">']
    for node in tree.roots():
        render_node(node, req_path, req_rel, 0, out, prefix)
    out.append("</ul></nav>")
    return "".join(out)


# -------------------------
# Content blocks
# -------------------------
def _state_block(state: str) -> str:
    return (
        '<div class="state-box project-state">'
        '<span class="state-dot"></span>'
        '<span class="label">State:</span> '
        f'<span class="value">{escape_html(state)}</span>'
        "</div>"
    )


def _video_grid(videos: List[str]) -> str:
    items = "".join(
        f'<video class="video-item" controls preload="metadata" src="{escape_html(v)}"></video>' for v in videos
    )
    return f'<section class="project-videos"><div class="video-grid">{items}</div></section>'


def _image_grid(images: List[str]) -> str:
    items = "".join(f'<img class="image-item" src="{escape_html(i)}" alt="" loading="lazy"/>' for i in images)
    return f'<section class="project-images"><div class="image-grid">{items}</div></section>'


def _meta_grid(info: ProjectInfo) -> str:
    out = ['<section class="meta-grid">']

    if info.tools:
        out.append('<div class="meta-card"><h2 class="section-title">Tools</h2>')
        out.append('<table class="mini-table"><tbody>')
        for t in info.tools:
            out.append(f'<tr><td class="cell-value">{escape_html(t)}</td></tr>')
        out.append("</tbody></table></div>")

    if info.links:
        out.append('<div class="meta-card"><h2 class="section-title">Links</h2>')
        out.append('<table class="mini-table"><tbody>')
        for l in info.links:
            out.append(
                '<tr><td class="cell-value">'
                f'<a class="link" href="{escape_html(l.link)}" target="_blank" rel="noopener">'
                f"{escape_html(l.description)}</a></td></tr>"
            )
        out.append("</tbody></table></div>")

    out.append("</section>")
    return "".join(out)


def build_project_content(info: ProjectInfo, markdown_source: str) -> str:
    content: List[str] = []

    if info.name:
        content.append(f'<h1 class="project-title">{escape_html(info.name)}</h1>')
    if info.description:
        content.append(f'<p class="project-description">{escape_html(info.description)}</p>')
    if info.state:
        content.append(_state_block(info.state))
    if info.videos:
        content.append(_video_grid(info.videos))
    if info.images:
        content.append(_image_grid(info.images))
    if (markdown_source or "").strip():
        content.append(f'<section class="project-content">{render_markdown(markdown_source)}</section>')
    if info.tools or info.links:
        content.append(_meta_grid(info))

    return "".join(content)


# -------------------------
# Pages
# -------------------------
def build_list_page(
    tree: ProjectTree,
    req_path: str,
    req_rel: str,
    template_path: str,
    prefix: str = SHOWCASE_PREFIX,
) -> str:
    template = load_template(template_path)
    sidebar = render_sidebar(tree, req_path, req_rel, prefix)
    return apply_template(template, LIST_PAGE_TITLE, sidebar, "")


def build_project_page(
    tree: ProjectTree,
    req_path: str,
    req_rel: str,
    info: ProjectInfo,
    markdown_source: str,
    template_path: str,
    prefix: str = SHOWCASE_PREFIX,
) -> str:
    template = load_template(template_path)
    sidebar = render_sidebar(tree, req_path, req_rel, prefix)
    content = build_project_content(info, markdown_source)
    return apply_template(template, info.name, sidebar, content)
