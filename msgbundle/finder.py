"""
Runtime lookup of other message packages from generated code.

Generated modules reference sibling packages through::

    from msgbundle.finder import finder as _finder
    std_msgs = _finder('std_msgs')

Bundling rewrites those lines into static relative imports.
"""
from __future__ import annotations

from types import ModuleType

from msgbundle.core.dependencies import get_registry


def finder(package_name: str) -> ModuleType:
    """Return the loaded module of ``package_name``, loading it if needed."""
    registry = get_registry()
    registry.find_message_files()
    handle = registry.get_package(package_name)
    if handle is None:
        handle = registry.load_message_package(package_name)
    return handle.module
