"""
Markdown -> HTML for project bodies.

Every construct gets exactly one CSS class so the page stylesheet owns all
visual styling:

  container      <div class="md">
  headings       <h1 class="md-h1"> ... <h6 class="md-h6">
  paragraph      <p class="md-p">
  lists          <ul class="md-ul">, <ol class="md-ol">, <li class="md-li">
  code           <pre class="md-pre"><code class="md-code language-xxx">
  inline code    <code class="md-code-inline">
  links/images   <a class="md-a">, <img class="md-img">
  blockquote     <blockquote class="md-blockquote">
  rule           <hr class="md-hr"/>
  tables         <table class="md-table">
  footnotes      <sup class="md-footnote-ref">, <div class="md-footnotes">,
                 <div class="md-footnote"><sup class="md-footnote-label">
  task items     <input class="md-task" type="checkbox" disabled>

Raw HTML in the source is escaped like any other text.
"""
import re
from typing import List, Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin


TASK_MARKER_RE = re.compile(r"^\[([ xX])\][ \t]+")

# Tokens that map 1:1 onto a fixed opening / closing tag.
OPEN_TAGS = {
    "blockquote_open": '<blockquote class="md-blockquote">',
    "bullet_list_open": '<ul class="md-ul">',
    "ordered_list_open": '<ol class="md-ol">',
    "list_item_open": '<li class="md-li">',
    "table_open": '<table class="md-table">',
    "thead_open": "<thead>",
    "tbody_open": "<tbody>",
    "tr_open": "<tr>",
    "th_open": "<td>",
    "td_open": "<td>",
    "footnote_block_open": '<div class="md-footnotes">',
    "em_open": '<em class="md-em">',
    "strong_open": '<strong class="md-strong">',
    "s_open": '<del class="md-del">',
}

CLOSE_TAGS = {
    "blockquote_close": "</blockquote>",
    "bullet_list_close": "</ul>",
    "ordered_list_close": "</ol>",
    "list_item_close": "</li>",
    "table_close": "</table>",
    "thead_close": "</thead>",
    "tbody_close": "</tbody>",
    "tr_close": "</tr>",
    "th_close": "</td>",
    "td_close": "</td>",
    "footnote_block_close": "</div>",
    "footnote_close": "</div>",
    "em_close": "</em>",
    "strong_close": "</strong>",
    "s_close": "</del>",
    "link_close": "</a>",
}


# -------------------------
# Escaping
# -------------------------
def escape_html(text: str) -> str:
    return (
        (text or "")
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def escape_attr(value: str) -> str:
    # same character set as text; kept separate so attribute handling can diverge
    return (
        (value or "")
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def is_absolute_url(url: str) -> bool:
    u = (url or "").lower()
    return u.startswith("http://") or u.startswith("https://")


# -------------------------
# Parser
# -------------------------
def build_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark", {"html": True})
    md.enable("table").enable("strikethrough")
    md.use(footnote_plugin)
    return md


_PARSER = build_parser()


# -------------------------
# Inline rendering
# -------------------------
def _link_open(token: Token) -> str:
    href = str(token.attrGet("href") or "")
    title = str(token.attrGet("title") or "")
    parts = [f'<a class="md-a" href="{escape_attr(href)}"']
    if title:
        parts.append(f' title="{escape_attr(title)}"')
    if is_absolute_url(href):
        parts.append(' target="_blank" rel="noopener noreferrer"')
    parts.append(">")
    return "".join(parts)


def _image(token: Token) -> str:
    src = str(token.attrGet("src") or "")
    title = str(token.attrGet("title") or "")
    out = f'<img class="md-img" src="{escape_attr(src)}"'
    if title:
        out += f' title="{escape_attr(title)}"'
    # alt is never reconstructed from the image's text children
    return out + ' alt="" />'


def _footnote_label(token: Token) -> str:
    meta = token.meta or {}
    label = meta.get("label")
    if label:
        return str(label)
    return str(int(meta.get("id", 0)) + 1)


def _task_marker(checked: bool) -> str:
    attr = ' checked="checked"' if checked else ""
    return f'<input class="md-task" type="checkbox" disabled="disabled"{attr}/>'


def render_inline(children: Optional[List[Token]], out: List[str]) -> None:
    for tok in children or []:
        t = tok.type
        if t == "text":
            out.append(escape_html(tok.content))
        elif t == "code_inline":
            out.append(f'<code class="md-code-inline">{escape_html(tok.content)}</code>')
        elif t == "html_inline":
            out.append(escape_html(tok.content))
        elif t == "softbreak":
            out.append("\n")
        elif t == "hardbreak":
            out.append('<br class="md-br"/>')
        elif t == "link_open":
            out.append(_link_open(tok))
        elif t == "image":
            out.append(_image(tok))
        elif t == "footnote_ref":
            out.append(f'<sup class="md-footnote-ref">{escape_html(_footnote_label(tok))}</sup>')
        elif t in OPEN_TAGS:
            out.append(OPEN_TAGS[t])
        elif t in CLOSE_TAGS:
            out.append(CLOSE_TAGS[t])


def _strip_task_marker(inline: Token) -> Optional[bool]:
    """
    If the inline token starts with a task marker, remove it from the first
    text child and return whether the box is checked.
    """
    children = inline.children or []
    if not children or children[0].type != "text":
        return None
    m = TASK_MARKER_RE.match(children[0].content)
    if not m:
        return None
    children[0].content = children[0].content[m.end():]
    return m.group(1) in ("x", "X")


# -------------------------
# Block rendering
# -------------------------
def _code_block(token: Token) -> str:
    lang = (token.info or "").strip() if token.type == "fence" else ""
    if lang:
        opening = f'<pre class="md-pre"><code class="md-code language-{escape_attr(lang)}">'
    else:
        opening = '<pre class="md-pre"><code class="md-code">'
    return opening + escape_html(token.content) + "</code></pre>"


def render_tokens(tokens: List[Token]) -> str:
    out: List[str] = []
    task_inlines = {}

    for idx, tok in enumerate(tokens):
        t = tok.type

        if t == "list_item_open":
            out.append(OPEN_TAGS[t])
            # task marker lives in the first inline of the item
            if (
                idx + 2 < len(tokens)
                and tokens[idx + 1].type == "paragraph_open"
                and tokens[idx + 2].type == "inline"
            ):
                checked = _strip_task_marker(tokens[idx + 2])
                if checked is not None:
                    task_inlines[idx + 2] = checked
        elif t == "paragraph_open":
            if not tok.hidden:
                out.append('<p class="md-p">')
        elif t == "paragraph_close":
            if not tok.hidden:
                out.append("</p>")
        elif t == "heading_open":
            out.append(f'<{tok.tag} class="md-{tok.tag}">')
        elif t == "heading_close":
            out.append(f"</{tok.tag}>")
        elif t == "inline":
            if idx in task_inlines:
                out.append(_task_marker(task_inlines[idx]))
            render_inline(tok.children, out)
        elif t in ("fence", "code_block"):
            out.append(_code_block(tok))
        elif t == "html_block":
            out.append(escape_html(tok.content))
        elif t == "hr":
            out.append('<hr class="md-hr"/>')
        elif t == "footnote_open":
            out.append(
                '<div class="md-footnote">'
                f'<sup class="md-footnote-label">{escape_html(_footnote_label(tok))}</sup>'
            )
        elif t in OPEN_TAGS:
            out.append(OPEN_TAGS[t])
        elif t in CLOSE_TAGS:
            out.append(CLOSE_TAGS[t])

    return "".join(out)


def render_markdown(source: str) -> str:
    tokens = _PARSER.parse(source or "")
    return '<div class="md">' + render_tokens(tokens) + "</div>"
