"""
Pydantic models for the message bundler.

This module defines the data models shared across the package:
- Generator layouts (where generated code lives on disk and how it is rewritten)
- Handles for loaded message packages
- Bundle results

All configuration-like models use Pydantic for validation and serialization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Layout Models
# ---------------------------------------------------------------------------


class RewriteRule(BaseModel):
    """
    A single source rewrite applied to generated files when bundling.

    ``pattern`` is a multiline regular expression and ``replacement`` uses
    ``re.sub`` template syntax (``\\g<1>`` for groups).
    """

    pattern: str = Field(description="Multiline regular expression to match.")
    replacement: str = Field(
        default="",
        description="re.sub replacement template. Empty string deletes the match.",
    )


class GeneratedLayout(BaseModel):
    """
    On-disk conventions of one message code generator.

    A workspace root contains ``<message_path>/<package>/<index_file>`` plus
    optional ``msg/`` and ``srv/`` subdirectories, and shared runtime base
    files under ``<base_path>``.
    """

    name: str = Field(description="Preset name, e.g. 'python' or 'genjs'.")
    message_path: str = Field(
        description="Path of the message directory relative to a workspace root.",
    )
    base_path: str = Field(
        description="Path of the shared runtime base files relative to a workspace root.",
    )
    base_files: List[str] = Field(
        default_factory=list,
        description="Filenames of the shared runtime base files to copy into a bundle.",
    )
    index_file: str = Field(description="Filename of each package's entry point.")
    bundle_dir: str = Field(
        default="ros",
        description="Name of the directory holding packages inside a bundle.",
    )
    subdirectories: List[str] = Field(
        default_factory=lambda: ["msg", "srv"],
        description="Generated-code subdirectories copied per package.",
    )
    rewrite_rules: List[RewriteRule] = Field(
        default_factory=list,
        description="Rewrites applied to every copied file except index files.",
    )


PYTHON_LAYOUT = GeneratedLayout(
    name="python",
    message_path="share/genpy/ros",
    base_path="share/genpy_base",
    base_files=["base_deserialize.py", "base_serialize.py"],
    index_file="_index.py",
    rewrite_rules=[
        RewriteRule(
            pattern=r"^from msgbundle\.finder import finder as _finder[ \t]*\r?\n?",
            replacement="",
        ),
        RewriteRule(
            pattern=r"^(\w+) = _finder\('\1'\)(?=[ \t]*\r?$)",
            replacement=r"from ...\g<1> import _index as \g<1>",
        ),
    ],
)

GENJS_LAYOUT = GeneratedLayout(
    name="genjs",
    message_path="share/gennodejs/ros",
    base_path="share/node_js",
    base_files=["base_deserialize.js", "base_serialize.js"],
    index_file="_index.js",
    rewrite_rules=[
        RewriteRule(
            pattern=r"^let _finder = require\('\.\./\.\./\.\./find\.js'\);[ \t]*\r?\n?",
            replacement="",
        ),
        RewriteRule(
            pattern=r"^let (\w+) = _?finder\('\1'\);",
            replacement=r"let \g<1> = require('../../\g<1>/_index.js');",
        ),
    ],
)

LAYOUT_PRESETS: Dict[str, GeneratedLayout] = {
    PYTHON_LAYOUT.name: PYTHON_LAYOUT,
    GENJS_LAYOUT.name: GENJS_LAYOUT,
}


# ---------------------------------------------------------------------------
# Loaded Package Models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ServiceHandlers:
    """Request/Response handler pair for one service type."""

    request: Any
    response: Any

    @property
    def Request(self) -> Any:
        return self.request

    @property
    def Response(self) -> Any:
        return self.response

    def __getitem__(self, key: str) -> Any:
        if key == "Request":
            return self.request
        if key == "Response":
            return self.response
        raise KeyError(key)


@dataclass
class PackageHandle:
    """
    In-memory handle for a loaded message package.

    ``msg`` maps type names to message handler classes and ``srv`` maps type
    names to their ``ServiceHandlers``.
    """

    name: str
    location: Path
    msg: Mapping[str, Any] = field(default_factory=dict)
    srv: Mapping[str, ServiceHandlers] = field(default_factory=dict)
    module: Optional[ModuleType] = None


# ---------------------------------------------------------------------------
# Bundle Models
# ---------------------------------------------------------------------------


class BundleReport(BaseModel):
    """Result of flattening every registered package into one output tree."""

    output_dir: str = Field(description="Absolute output directory.")
    bundle_root: str = Field(description="Directory holding the bundled packages.")
    packages: List[str] = Field(default_factory=list, description="Packages bundled.")
    files: List[str] = Field(
        default_factory=list,
        description="Absolute paths of every file written, sorted.",
    )
