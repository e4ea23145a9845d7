"""Shared fixtures: on-disk workspaces holding generated message packages."""

from pathlib import Path
from textwrap import dedent
from typing import Dict, Iterable, Optional

import pytest

from msgbundle.core.dependencies import reset_dependencies
from msgbundle.domain.models import PYTHON_LAYOUT


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dedent(text), encoding="utf-8")
    return path


def make_package(
    root: Path,
    name: str,
    msgs: Iterable[str] = (),
    srvs: Iterable[str] = (),
    extra_msg_files: Optional[Dict[str, str]] = None,
) -> Path:
    """Create a generated python-layout package under ``root`` and return its directory."""
    msgs = list(msgs)
    srvs = list(srvs)
    pkg_dir = root / PYTHON_LAYOUT.message_path / name

    index_lines = []
    if msgs or extra_msg_files:
        index_lines.append("from . import msg")
        init_lines = []
        for type_name in msgs:
            write(
                pkg_dir / "msg" / f"_{type_name}.py",
                f"""
                class {type_name}:
                    _type = '{name}/{type_name}'
                """,
            )
            init_lines.append(f"from ._{type_name} import {type_name}")
        for filename, text in (extra_msg_files or {}).items():
            write(pkg_dir / "msg" / filename, text)
        write(pkg_dir / "msg" / "__init__.py", "\n".join(init_lines) + "\n")

    if srvs:
        index_lines.append("from . import srv")
        init_lines = []
        for type_name in srvs:
            write(
                pkg_dir / "srv" / f"_{type_name}.py",
                f"""
                class {type_name}Request:
                    _type = '{name}/{type_name}Request'

                class {type_name}Response:
                    _type = '{name}/{type_name}Response'

                class {type_name}:
                    _type = '{name}/{type_name}'
                    _request_class = {type_name}Request
                    _response_class = {type_name}Response
                """,
            )
            init_lines.append(
                f"from ._{type_name} import {type_name}, {type_name}Request, {type_name}Response"
            )
        write(pkg_dir / "srv" / "__init__.py", "\n".join(init_lines) + "\n")

    write(pkg_dir / PYTHON_LAYOUT.index_file, "\n".join(index_lines) + "\n")
    return pkg_dir


@pytest.fixture
def workspaces(tmp_path):
    """Two overlaid workspace roots: ``high`` takes precedence over ``low``."""
    high = tmp_path / "high"
    low = tmp_path / "low"
    high.mkdir()
    low.mkdir()
    return high, low


@pytest.fixture
def env_workspaces(workspaces, monkeypatch):
    """Workspaces published through CMAKE_PREFIX_PATH with fresh process singletons."""
    high, low = workspaces
    monkeypatch.delenv("MSGBUNDLE_CONFIG", raising=False)
    monkeypatch.setenv("CMAKE_PREFIX_PATH", f"{high}:{low}")
    reset_dependencies()
    yield high, low
    reset_dependencies()
