"""
Handlers linked directly into the running program.

Lookups here bypass disk discovery entirely. Entries are stored per type
identifier as a small nested namespace::

    {"msg": Handler}
    {"srv": {"Request": RequestHandler, "Response": ResponseHandler}}
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence


class FastRegistry:
    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, Any]] = {}

    def register_message(self, type_id: str, handler: Any) -> None:
        self._entries.setdefault(type_id, {})["msg"] = handler

    def register_service(self, type_id: str, request: Any = None, response: Any = None) -> None:
        srv = self._entries.setdefault(type_id, {}).setdefault("srv", {})
        if request is not None:
            srv["Request"] = request
        if response is not None:
            srv["Response"] = response

    def get(self, type_id: str, key_path: Sequence[str]) -> Optional[Any]:
        """Follow ``key_path`` into the entry for ``type_id``; None when absent."""
        node: Any = self._entries.get(type_id)
        for key in key_path:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node

    def __contains__(self, type_id: str) -> bool:
        return type_id in self._entries

    def clear(self) -> None:
        self._entries.clear()
