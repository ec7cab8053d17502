"""
scene_info.py
-------------
Scene descriptions authored as YAML, converted into LoadingSessions.

Example (config/scenes/forest.yaml):

    scene_name: forest
    title: The Whispering Forest
    description: Find the lost shrine before nightfall.
    continue_to_wait: 5
    images:
      - images/forest_01.png
    hints:
      - hint: Press SHIFT to sprint.
        read_time: 8
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from loadscreen.core.debug.debug_logger import DebugLogger
from loadscreen.core.runtime.loading_settings import Loading
from loadscreen.loading.errors import InvalidConfiguration
from loadscreen.loading.session import Hint, LoadingSession

SCENES_DIR = Path(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))) / "config" / "scenes"


@dataclass(frozen=True)
class SceneInfo:
    """Authored metadata for one loadable scene."""
    scene_name: str
    title: Optional[str] = None
    description: Optional[str] = None
    continue_to_wait: int = 0
    hints: List[Hint] = field(default_factory=list)
    images: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SceneInfo":
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"Scene description must be a mapping, got {type(data).__name__}")
        if not data.get("scene_name"):
            raise InvalidConfiguration("Scene description is missing 'scene_name'")

        return cls(
            scene_name=data["scene_name"],
            title=data.get("title"),
            description=data.get("description"),
            continue_to_wait=data.get("continue_to_wait", 0),
            hints=[Hint.from_dict(h) for h in data.get("hints") or []],
            images=list(data.get("images") or []),
        )

    def to_session(self, minimum_wait: int = Loading.MINIMUM_WAIT,
                   image_change_speed: int = Loading.IMAGE_CHANGE_SPEED) -> LoadingSession:
        """Snapshot this scene as a session for one load request."""
        return LoadingSession(
            target_id=self.scene_name,
            title=self.title,
            description=self.description,
            continue_wait=self.continue_to_wait,
            minimum_wait=minimum_wait,
            images=tuple(self.images),
            image_change_speed=image_change_speed,
            hints=tuple(self.hints),
        )


class SceneInfoLoader:
    """Loads and caches scene descriptions from YAML files."""

    def __init__(self, base_path: Optional[Path] = None):
        """
        Args:
            base_path: Directory holding the YAML files (packaged scenes by default)
        """
        self.base_path = Path(base_path) if base_path else SCENES_DIR
        self.cache: Dict[str, SceneInfo] = {}

    def load(self, filename: str) -> SceneInfo:
        """
        Load a scene description.

        Args:
            filename: Path relative to base_path; ".yaml" is appended if missing

        Raises:
            FileNotFoundError: no such file
            InvalidConfiguration: the document is not a valid scene description
        """
        if not filename.endswith((".yaml", ".yml")):
            filename += ".yaml"

        if filename in self.cache:
            return self.cache[filename]

        full_path = self.base_path / filename
        if not full_path.exists():
            raise FileNotFoundError(f"Scene description not found: {full_path}")

        with open(full_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise InvalidConfiguration(f"Malformed scene description {full_path}: {e}") from e

        info = SceneInfo.from_dict(data)
        self.cache[filename] = info
        DebugLogger.system(f"Loaded scene '{info.scene_name}' from {filename}", category="config")
        return info

    def load_all(self) -> List[SceneInfo]:
        """Load every YAML file in base_path, sorted by filename."""
        if not self.base_path.is_dir():
            DebugLogger.warn(f"Scene directory missing: {self.base_path}", category="config")
            return []
        names = sorted(p.name for p in self.base_path.iterdir() if p.suffix in (".yaml", ".yml"))
        return [self.load(name) for name in names]
