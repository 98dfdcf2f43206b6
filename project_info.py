import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List

from jsonschema import ValidationError, validate

from errors import MalformedError, NotFoundError, StorageError


# Checked in order inside the project directory.
INFO_FILENAMES = ["projectData.json", "projectInfo.json", "project.json", "projectdata.json"]

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

PROJECT_INFO_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "project_name": {"type": "string"},
        "project_description": {"type": "string"},
        "project_state": {"type": "string"},
        "project_tools": _STRING_LIST,
        "project_images": _STRING_LIST,
        "project_videos": _STRING_LIST,
        "project_content": {"type": "string"},
        "project_links": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "link": {"type": "string"},
                    "description": {"type": "string"},
                },
            },
        },
    },
}


@dataclass
class ProjectLink:
    link: str = ""
    description: str = ""


@dataclass
class ProjectInfo:
    name: str = ""
    description: str = ""
    state: str = ""
    tools: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    videos: List[str] = field(default_factory=list)
    # markdown file, relative to the project directory
    content_path: str = ""
    links: List[ProjectLink] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectInfo":
        return cls(
            name=data.get("project_name", ""),
            description=data.get("project_description", ""),
            state=data.get("project_state", ""),
            tools=list(data.get("project_tools") or []),
            images=list(data.get("project_images") or []),
            videos=list(data.get("project_videos") or []),
            content_path=data.get("project_content", ""),
            links=[
                ProjectLink(link=l.get("link", ""), description=l.get("description", ""))
                for l in data.get("project_links") or []
            ],
        )


def project_dir_for(base_dir: str, rel_path: str) -> str:
    rel = (rel_path or "").lstrip("/")
    return os.path.join(base_dir, rel)


def parse_project_info(data: Any, source: str = "<memory>") -> ProjectInfo:
    try:
        validate(instance=data, schema=PROJECT_INFO_SCHEMA)
    except ValidationError as e:
        raise MalformedError(f"Invalid project info in {source}: {e.message}") from e
    return ProjectInfo.from_dict(data)


def load_project_info(base_dir: str, rel_path: str) -> ProjectInfo:
    proj_dir = project_dir_for(base_dir, rel_path)

    for name in INFO_FILENAMES:
        p = os.path.join(proj_dir, name)
        if not os.path.isfile(p):
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise MalformedError(f"JSON parse error in {p}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"I/O error reading {p}: {e}") from e
        return parse_project_info(data, p)

    raise NotFoundError(f"project info not found in {proj_dir}")


def load_markdown(base_dir: str, rel_path: str, content_path: str) -> str:
    """
    Markdown sits next to the project JSON. Blank content_path means no body
    and touches nothing on disk.
    """
    if not (content_path or "").strip():
        return ""
    path = os.path.join(project_dir_for(base_dir, rel_path), content_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"I/O error reading {path}: {e}") from e
