import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from jsonschema import ValidationError, validate

from errors import MalformedError, StorageError


# =========================
# SCHEMA
# =========================
# { "project_tree": [ { name, path, children: [...] }, ... ] }
PROJECT_TREE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["project_tree"],
    "properties": {
        "project_tree": {"type": "array", "items": {"$ref": "#/$defs/node"}},
    },
    "$defs": {
        "node": {
            "type": "object",
            "required": ["name", "path"],
            "properties": {
                "name": {"type": "string"},
                "path": {"type": "string"},
                "children": {"type": "array", "items": {"$ref": "#/$defs/node"}},
            },
        },
    },
}


@dataclass
class NavNode:
    name: str
    path: str
    children: List["NavNode"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NavNode":
        return cls(
            name=data["name"],
            path=data["path"],
            children=[cls.from_dict(c) for c in data.get("children") or []],
        )


class ProjectTree:
    """Read-only forest of navigation nodes."""

    def __init__(self, roots: List[NavNode]):
        self._roots = list(roots)

    def roots(self) -> List[NavNode]:
        return self._roots

    def count(self) -> int:
        return sum(_count_nodes(r) for r in self._roots)

    def find_by_path(self, target_path: str) -> Optional[NavNode]:
        for r in self._roots:
            hit = _find_by_path(r, target_path)
            if hit is not None:
                return hit
        return None

    def iter_nodes(self) -> Iterator[NavNode]:
        """Pre-order: parent before children, siblings in source order."""
        stack = list(reversed(self._roots))
        while stack:
            node = stack.pop()
            stack.extend(reversed(node.children))
            yield node

    def __iter__(self) -> Iterator[NavNode]:
        return self.iter_nodes()

    def __len__(self) -> int:
        return self.count()


def _count_nodes(node: NavNode) -> int:
    return 1 + sum(_count_nodes(c) for c in node.children)


def _find_by_path(node: NavNode, target: str) -> Optional[NavNode]:
    if node.path == target:
        return node
    for c in node.children:
        hit = _find_by_path(c, target)
        if hit is not None:
            return hit
    return None


def parse_project_tree(data: Any) -> ProjectTree:
    try:
        validate(instance=data, schema=PROJECT_TREE_SCHEMA)
    except ValidationError as e:
        raise MalformedError(f"Invalid project tree: {e.message}") from e
    return ProjectTree([NavNode.from_dict(n) for n in data["project_tree"]])


def load_project_tree(path: str) -> ProjectTree:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedError(f"JSON parse error in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"I/O error reading {path}: {e}") from e
    return parse_project_tree(data)
