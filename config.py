import logging
import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv


# =========================
# CONFIG
# =========================
load_dotenv()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _split_list(raw: str) -> List[str]:
    return [x.strip() for x in (raw or "").split(",") if x.strip()]


@dataclass(frozen=True)
class Settings:
    data_dir: str = "data"
    project_tree_path: str = "data/displayProjectList.json"
    project_data_dir: str = "data/projectData"
    template_path: str = "data/templates/projectpage.html"
    components_dir: str = "components"
    static_components: tuple = ("underConstruction.html",)
    index_path: str = "res/index.html"
    static_dir: str = "static"
    showcase_prefix: str = "/projects"
    components_prefix: str = "/components"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = os.getenv("DATA_DIR", "data").strip()
        return cls(
            data_dir=data_dir,
            project_tree_path=os.getenv(
                "PROJECT_TREE_PATH", os.path.join(data_dir, "displayProjectList.json")
            ).strip(),
            project_data_dir=os.getenv("PROJECT_DATA_DIR", os.path.join(data_dir, "projectData")).strip(),
            template_path=os.getenv(
                "TEMPLATE_PATH", os.path.join(data_dir, "templates", "projectpage.html")
            ).strip(),
            components_dir=os.getenv("COMPONENTS_DIR", "components").strip(),
            static_components=tuple(_split_list(os.getenv("STATIC_COMPONENTS", "underConstruction.html"))),
            index_path=os.getenv("INDEX_PATH", "res/index.html").strip(),
            static_dir=os.getenv("STATIC_DIR", "static").strip(),
            showcase_prefix="/" + os.getenv("SHOWCASE_PREFIX", "/projects").strip().strip("/"),
            components_prefix="/" + os.getenv("COMPONENTS_PREFIX", "/components").strip().strip("/"),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            host=os.getenv("HOST", "0.0.0.0").strip(),
            port=int(os.getenv("PORT", "8000")),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format=LOG_FORMAT,
    )
