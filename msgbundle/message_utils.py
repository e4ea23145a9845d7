"""
Module-level access to the process-wide message registries.

On start-up the workspace search path (``CMAKE_PREFIX_PATH`` by default) is
scanned for generated message packages and their locations are cached. When a
package is asked for, it is loaded from that location and kept in memory.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from msgbundle.core.dependencies import get_flattener, get_registry, get_resolver
from msgbundle.domain.models import BundleReport, PackageHandle, ServiceHandlers


def get_top_level_message_directory() -> Path:
    return get_registry().get_top_level_message_directory()


def find_message_files() -> None:
    get_registry().find_message_files()


async def flatten(output_dir: Union[str, Path]) -> BundleReport:
    """Bundle every discovered package into ``output_dir``; completes when all files are written."""
    return await get_flattener().flatten(output_dir)


def load_message_package(name: str) -> PackageHandle:
    return get_registry().load_message_package(name)


def get_package(name: str) -> Optional[PackageHandle]:
    return get_registry().get_package(name)


def get_handler_for_msg_type(type_id: str, load_if_missing: bool = False) -> Any:
    return get_resolver().get_handler_for_msg_type(type_id, load_if_missing)


def get_handler_for_srv_type(type_id: str, load_if_missing: bool = False) -> ServiceHandlers:
    return get_resolver().get_handler_for_srv_type(type_id, load_if_missing)
