"""
Discovery of generated message packages across workspace roots.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable

from msgbundle.domain.models import GeneratedLayout

logger = logging.getLogger(__name__)


def message_directory(root: Path, layout: GeneratedLayout) -> Path:
    """Return the directory holding generated packages under ``root``."""
    return Path(root) / layout.message_path


def scan_workspaces(
    search_path: Iterable[Path],
    layout: GeneratedLayout,
    locations: Dict[str, Path],
) -> None:
    """
    Record the entry point of every package found under ``search_path``.

    Roots are visited in order and a package name already present in
    ``locations`` is never overwritten, so a package in an earlier root masks
    a same-named package in a later one.
    """
    for root in search_path:
        msg_dir = message_directory(root, layout)
        if not msg_dir.is_dir():
            logger.debug(f"No message directory in workspace {root}")
            continue

        for pkg_dir in sorted(msg_dir.iterdir(), key=lambda p: p.name):
            if not pkg_dir.is_dir():
                continue
            package_name = pkg_dir.name
            if package_name in locations:
                logger.debug(
                    f"Package {package_name} in {root} is masked by {locations[package_name]}"
                )
                continue
            locations[package_name] = (pkg_dir / layout.index_file).absolute()
            logger.debug(f"Found message package {package_name} in {root}")
