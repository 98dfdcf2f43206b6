from dataclasses import dataclass
from typing import Optional

from project_tree import NavNode, ProjectTree


ROOT = "ROOT"
NO_MATCH = "NO_MATCH"
NOT_FOUND = "NOT_FOUND"
REDIRECT = "REDIRECT"
RENDER = "RENDER"


@dataclass
class Resolution:
    state: str
    request_path: str
    request_rel: str
    node: Optional[NavNode] = None
    location: str = ""
    # matched node path with the showcase prefix removed, no leading slash
    project_rel: str = ""


def strip_prefix(path: str, prefix: str) -> str:
    if prefix and path.startswith(prefix):
        return path[len(prefix):]
    return path


def path_matches(request_path: str, node_path: str) -> bool:
    """Exact match, or node_path is a prefix ending on a '/' boundary."""
    if request_path == node_path:
        return True
    return (
        len(request_path) > len(node_path)
        and request_path.startswith(node_path)
        and request_path[len(node_path)] == "/"
    )


def find_longest_match(tree: ProjectTree, request_path: str) -> Optional[NavNode]:
    best: Optional[NavNode] = None
    best_len = 0
    for node in tree.iter_nodes():
        p = node.path
        # strictly longer replaces, so the first of equal-length matches wins
        if path_matches(request_path, p) and len(p) > best_len:
            best = node
            best_len = len(p)
    return best


def relative_request_path(request_path: str, prefix: str) -> str:
    return strip_prefix(request_path, prefix).strip("/")


def resolve(tree: ProjectTree, request_path: str, prefix: str) -> Resolution:
    rel = relative_request_path(request_path, prefix)
    if not rel:
        return Resolution(ROOT, request_path, rel)

    node = find_longest_match(tree, request_path)
    if node is None:
        return Resolution(NO_MATCH, request_path, rel)

    remainder = request_path[len(node.path):].lstrip("/")
    if remainder:
        # assets below a project are served elsewhere
        return Resolution(NOT_FOUND, request_path, rel, node=node)

    if not request_path.endswith("/"):
        location = node.path.rstrip("/") + "/"
        return Resolution(REDIRECT, request_path, rel, node=node, location=location)

    project_rel = strip_prefix(node.path, prefix).lstrip("/")
    return Resolution(RENDER, request_path, rel, node=node, project_rel=project_rel)
