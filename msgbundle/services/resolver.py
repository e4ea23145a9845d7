"""
Resolution of ``"package/TypeName"`` identifiers to message and service handlers.

Handlers registered in the fast registry win; otherwise the package is looked
up among loaded packages, optionally loading it from disk first. Both paths
return handler classes, never instances.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from msgbundle.data.fast_registry import FastRegistry
from msgbundle.data.registry import PackageRegistry
from msgbundle.domain.errors import NotFoundError
from msgbundle.domain.models import PackageHandle, ServiceHandlers

logger = logging.getLogger(__name__)


def split_type_id(type_id: str) -> Tuple[str, str]:
    package, _, type_name = type_id.partition("/")
    return package, type_name


class TypeResolver:
    def __init__(self, registry: PackageRegistry, fast_registry: Optional[FastRegistry] = None):
        self.registry = registry
        self.fast_registry = fast_registry or FastRegistry()

    def _get_or_load(self, package: str, load_if_missing: bool) -> Optional[PackageHandle]:
        handle = self.registry.get_package(package)
        if handle is None and load_if_missing:
            self.registry.find_message_files()
            self.registry.load_message_package(package)
            handle = self.registry.get_package(package)
        return handle

    def get_handler_for_msg_type(self, type_id: str, load_if_missing: bool = False) -> Any:
        handler = self.fast_registry.get(type_id, ("msg",))
        if handler is not None:
            return handler

        package, type_name = split_type_id(type_id)
        handle = self._get_or_load(package, load_if_missing)
        if handle is None:
            raise NotFoundError(f"Unable to find message package {package}", identifier=package)

        try:
            return handle.msg[type_name]
        except KeyError:
            raise NotFoundError(
                f"Unable to find message type {type_id}", identifier=type_id
            ) from None

    def get_handler_for_srv_type(self, type_id: str, load_if_missing: bool = False) -> ServiceHandlers:
        request = self.fast_registry.get(type_id, ("srv", "Request"))
        response = self.fast_registry.get(type_id, ("srv", "Response"))
        if request is not None and response is not None:
            return ServiceHandlers(request=request, response=response)

        package, type_name = split_type_id(type_id)
        handle = self._get_or_load(package, load_if_missing)
        if handle is None:
            raise NotFoundError(
                f"Unable to find service package {package}. "
                f"Request: {request is not None}, Response: {response is not None}",
                identifier=package,
                request_found=request is not None,
                response_found=response is not None,
            )

        try:
            return handle.srv[type_name]
        except KeyError:
            raise NotFoundError(
                f"Unable to find service type {type_id}",
                identifier=type_id,
                request_found=request is not None,
                response_found=response is not None,
            ) from None
