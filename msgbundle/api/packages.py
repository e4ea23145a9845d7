"""
HTTP endpoints for inspecting discovered packages, resolving types and
building bundles.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from msgbundle.core.dependencies import get_flattener, get_registry, get_resolver
from msgbundle.data.registry import PackageRegistry
from msgbundle.domain.errors import BundleError, LoadError, NotFoundError
from msgbundle.domain.models import BundleReport, PackageHandle
from msgbundle.services.flattener import Flattener
from msgbundle.services.resolver import TypeResolver

logger = logging.getLogger(__name__)
router = APIRouter()


class BundleRequest(BaseModel):
    output_dir: str = Field(description="Directory to write the bundle into.")


def _handler_name(handler: Any) -> str:
    return f"{getattr(handler, '__module__', '?')}.{getattr(handler, '__qualname__', repr(handler))}"


def _describe(handle: PackageHandle) -> Dict[str, Any]:
    return {
        "name": handle.name,
        "location": str(handle.location),
        "msg": sorted(handle.msg),
        "srv": sorted(handle.srv),
    }


def _load_error(e: LoadError) -> HTTPException:
    logger.error(f"Package load failed: {e}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


# ---------------------------------------------------------------------------
# Packages
# ---------------------------------------------------------------------------

@router.get("/packages")
def list_packages(registry: PackageRegistry = Depends(get_registry)) -> dict:
    """
    List every discovered package with its entry point and load state.
    """
    registry.find_message_files()
    packages: List[Dict[str, Any]] = [
        {
            "name": name,
            "location": str(location),
            "loaded": registry.get_package(name) is not None,
        }
        for name, location in sorted(registry.locations.items())
    ]
    return {"packages": packages}


@router.get("/packages/{name}")
def get_package(
    name: str,
    load: bool = Query(False, description="Load the package if it is not loaded yet."),
    registry: PackageRegistry = Depends(get_registry),
) -> dict:
    registry.find_message_files()
    handle = registry.get_package(name)
    if handle is None and load:
        try:
            handle = registry.load_message_package(name)
        except NotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        except LoadError as e:
            raise _load_error(e)

    if handle is None:
        if name in registry.locations:
            return {"name": name, "location": str(registry.locations[name]), "loaded": False}
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown package {name}")

    return {**_describe(handle), "loaded": True}


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@router.get("/types/msg/{package}/{type_name}")
def resolve_msg_type(
    package: str,
    type_name: str,
    load: bool = Query(False),
    resolver: TypeResolver = Depends(get_resolver),
) -> dict:
    type_id = f"{package}/{type_name}"
    try:
        handler = resolver.get_handler_for_msg_type(type_id, load)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except LoadError as e:
        raise _load_error(e)
    return {"type": type_id, "handler": _handler_name(handler)}


@router.get("/types/srv/{package}/{type_name}")
def resolve_srv_type(
    package: str,
    type_name: str,
    load: bool = Query(False),
    resolver: TypeResolver = Depends(get_resolver),
) -> dict:
    type_id = f"{package}/{type_name}"
    try:
        handlers = resolver.get_handler_for_srv_type(type_id, load)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except LoadError as e:
        raise _load_error(e)
    return {
        "type": type_id,
        "request": _handler_name(handlers.request),
        "response": _handler_name(handlers.response),
    }


# ---------------------------------------------------------------------------
# Bundles
# ---------------------------------------------------------------------------

@router.post("/bundle")
async def create_bundle(
    body: BundleRequest,
    flattener: Flattener = Depends(get_flattener),
) -> BundleReport:
    """
    Flatten every discovered package into ``output_dir``.

    Responds only after every file has been written.
    """
    await run_in_threadpool(flattener.registry.find_message_files)
    try:
        return await flattener.flatten(body.output_dir)
    except BundleError as e:
        logger.error(f"Bundle failed: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
