"""
Bundler settings.

Defaults work out of the box; a YAML (or JSON) file named by the
``MSGBUNDLE_CONFIG`` environment variable can override them, e.g.::

    search_path_env_var: CMAKE_PREFIX_PATH
    layout: genjs
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field

from msgbundle.domain.models import LAYOUT_PRESETS, GeneratedLayout, RewriteRule

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "MSGBUNDLE_CONFIG"
DEFAULT_SEARCH_PATH_ENV_VAR = "CMAKE_PREFIX_PATH"


class BundlerSettings(BaseModel):
    search_path_env_var: str = Field(
        default=DEFAULT_SEARCH_PATH_ENV_VAR,
        description="Environment variable holding the colon-separated workspace roots.",
    )
    layout: Literal["python", "genjs"] = Field(
        default="python",
        description="Generator layout preset describing where generated code lives.",
    )
    rewrite_rules: Optional[List[RewriteRule]] = Field(
        default=None,
        description="Replaces the preset's rewrite rules when set.",
    )

    def resolve_layout(self) -> GeneratedLayout:
        layout = LAYOUT_PRESETS[self.layout]
        if self.rewrite_rules is not None:
            layout = layout.model_copy(update={"rewrite_rules": list(self.rewrite_rules)})
        return layout


def load_settings(path: Optional[Path] = None) -> BundlerSettings:
    """
    Load settings from ``path`` or the file named by ``MSGBUNDLE_CONFIG``.

    Without either, defaults are returned. A file that cannot be parsed is an
    error rather than a silent fallback.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_FILE_ENV_VAR)
        if not env_path:
            return BundlerSettings()
        path = Path(env_path).expanduser()

    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    logger.debug(f"Loaded settings from {path}")
    return BundlerSettings(**raw)


def parse_search_path(value: Optional[str]) -> List[Path]:
    """Split a colon-separated list of workspace roots, dropping empty entries."""
    if not value:
        return []
    return [Path(part).expanduser() for part in value.split(os.pathsep) if part]
