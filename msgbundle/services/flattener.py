"""
Flatten every registered message package into one self-contained output tree.

Layout of the result::

    <output_dir>/<base files>
    <output_dir>/ros/<package>/<index file>
    <output_dir>/ros/<package>/msg/<file>
    <output_dir>/ros/<package>/srv/<file>

Cross-package lookups through the runtime finder are rewritten into static
relative references, so the bundle needs no search path at runtime.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from msgbundle.data.registry import PackageRegistry
from msgbundle.domain.errors import BundleError
from msgbundle.domain.models import BundleReport, GeneratedLayout
from msgbundle.services.rewrite import make_rewriter
from msgbundle.storage.fs_utils import copy_file, ensure_directory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CopyJob:
    source: Path
    destination: Path
    rewrite: Optional[Callable[[str], str]] = None


class Flattener:
    def __init__(
        self,
        registry: PackageRegistry,
        search_path: Optional[Sequence[Path]] = None,
        layout: Optional[GeneratedLayout] = None,
    ):
        self.registry = registry
        self.search_path = [Path(p) for p in (search_path if search_path is not None else registry.search_path)]
        self.layout = layout or registry.layout
        self._rewrite = make_rewriter(self.layout.rewrite_rules)

    # ========================================================================
    # Job planning
    # ========================================================================

    def _base_file_jobs(self, output_dir: Path) -> List[CopyJob]:
        """Copy the shared base files from the first root that has them."""
        for root in self.search_path:
            check_path = root / self.layout.base_path
            if not check_path.is_dir():
                continue
            jobs = [
                CopyJob(check_path / name, output_dir / name)
                for name in self.layout.base_files
                if (check_path / name).is_file()
            ]
            logger.debug(f"Using base files from {check_path}")
            return jobs
        logger.warning(f"No {self.layout.base_path} directory found in any workspace")
        return []

    def _package_jobs(self, package_name: str, index_path: Path, bundle_root: Path) -> List[CopyJob]:
        package_dir = index_path.parent
        package_out = bundle_root / package_name

        listings: List[Tuple[str, List[Path]]] = []
        for sub in self.layout.subdirectories:
            source_dir = package_dir / sub
            try:
                entries = sorted(source_dir.iterdir(), key=lambda p: p.name)
            except FileNotFoundError:
                # Message-only or service-only package.
                logger.debug(f"Package {package_name} has no {sub}/ directory")
                continue
            except OSError as e:
                raise BundleError(
                    f"Error while flattening generated messages for {package_name}: {e}",
                    path=source_dir,
                ) from e
            listings.append((sub, entries))

        ensure_directory(package_out)
        jobs: List[CopyJob] = []
        for sub, entries in listings:
            output_sub = ensure_directory(package_out / sub)
            for entry in entries:
                if not entry.is_file():
                    continue
                rewrite = None if entry.name == self.layout.index_file else self._rewrite
                jobs.append(CopyJob(entry, output_sub / entry.name, rewrite))

        jobs.append(CopyJob(index_path, package_out / self.layout.index_file))
        return jobs

    # ========================================================================
    # Execution
    # ========================================================================

    async def _run(self, job: CopyJob) -> Path:
        try:
            return await copy_file(job.source, job.destination, job.rewrite)
        except (OSError, UnicodeDecodeError) as e:
            raise BundleError(f"Failed to copy {job.source} to {job.destination}: {e}", path=job.source) from e

    async def flatten(self, output_dir: Union[str, Path]) -> BundleReport:
        """
        Copy every registered package into ``output_dir``.

        All copies run concurrently and are awaited together; the first
        failure is raised once every copy has finished.
        """
        output_dir = Path(output_dir).expanduser().resolve()
        bundle_root = ensure_directory(output_dir / self.layout.bundle_dir)

        errors: List[BaseException] = []
        jobs = self._base_file_jobs(output_dir)
        packages: List[str] = []
        for package_name, index_path in sorted(self.registry.locations.items()):
            try:
                jobs.extend(self._package_jobs(package_name, index_path, bundle_root))
            except BundleError as e:
                logger.error(str(e))
                errors.append(e)
                continue
            packages.append(package_name)

        logger.info(f"Flattening {len(packages)} packages ({len(jobs)} files) into {output_dir}")
        results = await asyncio.gather(*(self._run(job) for job in jobs), return_exceptions=True)

        written: List[str] = []
        for result in results:
            if isinstance(result, BaseException):
                errors.append(result)
            else:
                written.append(str(result))

        if errors:
            raise errors[0]

        return BundleReport(
            output_dir=str(output_dir),
            bundle_root=str(bundle_root),
            packages=packages,
            files=sorted(written),
        )
