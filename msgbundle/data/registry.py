from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Set

from msgbundle.data.scanner import message_directory, scan_workspaces
from msgbundle.domain.errors import LoadError, NotFoundError
from msgbundle.domain.models import GeneratedLayout, PackageHandle, PYTHON_LAYOUT
from msgbundle.storage.loader import Loader, ModuleLoader

logger = logging.getLogger(__name__)


class PackageRegistry:
    """
    Package locations discovered on disk and the packages loaded from them.

    Locations are filled once by ``find_message_files()`` and loaded packages
    are cached until ``reset()``.
    """

    def __init__(
        self,
        search_path: Sequence[Path],
        layout: GeneratedLayout = PYTHON_LAYOUT,
        loader: Optional[Loader] = None,
    ):
        self.search_path: List[Path] = [Path(p) for p in search_path]
        self.layout = layout
        self.loader = loader or ModuleLoader()
        self._locations: Dict[str, Path] = {}
        self._loaded: Dict[str, PackageHandle] = {}
        self._loading: Set[str] = set()

    @property
    def locations(self) -> Mapping[str, Path]:
        return MappingProxyType(self._locations)

    def get_top_level_message_directory(self) -> Path:
        if not self.search_path:
            raise NotFoundError("Search path is empty", identifier="")
        return message_directory(self.search_path[0], self.layout)

    def find_message_files(self) -> None:
        """Scan the search path once; later calls are no-ops."""
        if self._locations:
            return
        scan_workspaces(self.search_path, self.layout, self._locations)
        logger.info(
            f"Found {len(self._locations)} message packages in {len(self.search_path)} workspaces"
        )

    def load_message_package(self, name: str) -> PackageHandle:
        location = self._locations.get(name)
        if location is None:
            raise NotFoundError(f"Unable to find message package {name}", identifier=name)
        if name in self._loading:
            raise LoadError(name, RecursionError(f"{name} is already being loaded"))

        self._loading.add(name)
        try:
            handle = self.loader.load(name, location)
        except Exception as e:
            logger.error(f"Failed to load message package {name} from {location}: {e}", exc_info=True)
            raise LoadError(name, e) from e
        finally:
            self._loading.discard(name)

        self._loaded[name] = handle
        logger.debug(f"Loaded message package {name}")
        return handle

    def get_package(self, name: str) -> Optional[PackageHandle]:
        return self._loaded.get(name)

    def loaded_packages(self) -> Dict[str, PackageHandle]:
        return dict(self._loaded)

    def reset(self) -> None:
        self._locations.clear()
        self._loaded.clear()
        self._loading.clear()
