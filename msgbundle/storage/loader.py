"""
Loading generated message packages into memory.

The registry only talks to the abstract ``Loader``; ``ModuleLoader`` is the
default implementation that executes a package's generated Python entry point.
"""
from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any, Dict

from msgbundle.domain.models import PackageHandle, ServiceHandlers

logger = logging.getLogger(__name__)

MODULE_NAME_PREFIX = "_msgbundle_"


class Loader(ABC):
    """
    Abstract base class for turning a package location into a handle.
    """

    @abstractmethod
    def load(self, name: str, location: Path) -> PackageHandle:
        """Load the package ``name`` whose entry point is ``location``."""
        pass


class ModuleLoader(Loader):
    """
    Load a package by executing its generated ``_index.py`` as a Python package.

    The package directory becomes the module's search path, so the index can
    import its ``msg`` and ``srv`` subpackages relatively.
    """

    def load(self, name: str, location: Path) -> PackageHandle:
        location = Path(location)
        module_name = f"{MODULE_NAME_PREFIX}{name}"
        spec = importlib.util.spec_from_file_location(
            module_name,
            location,
            submodule_search_locations=[str(location.parent)],
        )
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot build an import spec for {location}")

        _forget(module_name)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            _forget(module_name)
            raise

        logger.debug(f"Executed {location} as {module_name}")
        return build_handle(name, location, module)


def _forget(module_name: str) -> None:
    """Drop a generated package and its submodules from ``sys.modules``."""
    prefix = f"{module_name}."
    for key in [k for k in sys.modules if k == module_name or k.startswith(prefix)]:
        del sys.modules[key]


def build_handle(name: str, location: Path, module: ModuleType) -> PackageHandle:
    """Collect message and service handlers exported by a package module."""
    return PackageHandle(
        name=name,
        location=Path(location),
        msg=collect_messages(getattr(module, "msg", None)),
        srv=collect_services(getattr(module, "srv", None)),
        module=module,
    )


def _public_members(namespace: Any) -> Dict[str, Any]:
    if namespace is None:
        return {}
    if isinstance(namespace, Mapping):
        return dict(namespace)
    return {
        key: value
        for key, value in vars(namespace).items()
        if not key.startswith("_") and not isinstance(value, ModuleType)
    }


def collect_messages(namespace: Any) -> Dict[str, Any]:
    """
    Message handlers are the public classes of the ``msg`` namespace (or every
    value when it is a mapping).
    """
    members = _public_members(namespace)
    if isinstance(namespace, Mapping):
        return members
    return {key: value for key, value in members.items() if inspect.isclass(value)}


def _service_pair(entry: Any):
    if isinstance(entry, ServiceHandlers):
        return entry.request, entry.response
    if isinstance(entry, Mapping):
        return entry.get("Request"), entry.get("Response")
    request = getattr(entry, "Request", None) or getattr(entry, "_request_class", None)
    response = getattr(entry, "Response", None) or getattr(entry, "_response_class", None)
    return request, response


def collect_services(namespace: Any) -> Dict[str, ServiceHandlers]:
    """
    Pair up request and response handlers for every service type.

    Supported shapes, per entry: an object or mapping carrying
    ``Request``/``Response``, a genpy-style class with
    ``_request_class``/``_response_class``, or loose ``<Name>Request`` and
    ``<Name>Response`` classes.
    """
    members = _public_members(namespace)
    services: Dict[str, ServiceHandlers] = {}

    for key, entry in members.items():
        request, response = _service_pair(entry)
        if request is not None and response is not None:
            services[key] = ServiceHandlers(request=request, response=response)

    for key, entry in members.items():
        if not key.endswith("Request"):
            continue
        base = key[: -len("Request")]
        if not base or base in services:
            continue
        response = members.get(f"{base}Response")
        if response is not None:
            services[base] = ServiceHandlers(request=entry, response=response)

    return services
