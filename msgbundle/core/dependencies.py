import os
from pathlib import Path
from typing import List, Optional

from msgbundle.core.config import BundlerSettings, load_settings, parse_search_path
from msgbundle.data.fast_registry import FastRegistry
from msgbundle.data.registry import PackageRegistry
from msgbundle.domain.models import GeneratedLayout
from msgbundle.services.flattener import Flattener
from msgbundle.services.resolver import TypeResolver

_settings: Optional[BundlerSettings] = None
_registry: Optional[PackageRegistry] = None
_fast_registry: Optional[FastRegistry] = None
_resolver: Optional[TypeResolver] = None


def get_settings() -> BundlerSettings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_search_path() -> List[Path]:
    return parse_search_path(os.environ.get(get_settings().search_path_env_var))


def get_layout() -> GeneratedLayout:
    return get_settings().resolve_layout()


def get_registry() -> PackageRegistry:
    global _registry
    if _registry is None:
        _registry = PackageRegistry(get_search_path(), get_layout())
    return _registry


def get_fast_registry() -> FastRegistry:
    global _fast_registry
    if _fast_registry is None:
        _fast_registry = FastRegistry()
    return _fast_registry


def get_resolver() -> TypeResolver:
    global _resolver
    if _resolver is None:
        _resolver = TypeResolver(get_registry(), get_fast_registry())
    return _resolver


def get_flattener() -> Flattener:
    registry = get_registry()
    return Flattener(registry, registry.search_path, registry.layout)


def reset_dependencies() -> None:
    """Drop every process-wide singleton; the next access rebuilds from the environment."""
    global _settings, _registry, _fast_registry, _resolver
    _settings = None
    _registry = None
    _fast_registry = None
    _resolver = None
