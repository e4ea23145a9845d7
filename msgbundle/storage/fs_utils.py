"""
Filesystem helpers used while bundling generated message code.
"""
from __future__ import annotations

import contextlib
import logging
import uuid
from pathlib import Path
from typing import Callable, Optional, Union

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def ensure_directory(directory: PathLike) -> Path:
    """
    Create ``directory`` and every missing parent.

    An existing directory is success. Any other failure (permissions, a file
    in the way) propagates to the caller. This runs synchronously so the
    directory exists before any copy into it is issued.
    """
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


async def copy_file(
    source: PathLike,
    destination: PathLike,
    rewrite: Optional[Callable[[str], str]] = None,
) -> Path:
    """
    Copy ``source`` to ``destination``, optionally rewriting its text.

    The whole source is read into memory. Without ``rewrite`` the bytes are
    written unchanged; with it the content is decoded as UTF-8, passed through
    ``rewrite`` and re-encoded. The result goes to a temporary sibling file
    that is renamed onto ``destination``, so readers never see a partial file.
    """
    source = Path(source)
    destination = Path(destination)

    async with aiofiles.open(source, "rb") as f:
        data = await f.read()

    if rewrite is not None:
        data = rewrite(data.decode("utf-8")).encode("utf-8")

    tmp_path = destination.with_name(f".{destination.name}.{uuid.uuid4().hex}.tmp")
    try:
        async with aiofiles.open(tmp_path, "wb") as f:
            await f.write(data)
        await aiofiles.os.replace(tmp_path, destination)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            await aiofiles.os.remove(tmp_path)
        raise

    logger.debug(f"Copied {source} -> {destination}")
    return destination
