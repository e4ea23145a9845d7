"""
Error taxonomy for locating, loading and bundling message packages.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class MessageBundleError(Exception):
    """Base class for every error raised by msgbundle."""


class NotFoundError(MessageBundleError, LookupError):
    """
    A package or type could not be located in any registry.

    For service lookups ``request_found``/``response_found`` record which
    halves the fast registry knew about.
    """

    def __init__(
        self,
        message: str,
        identifier: str,
        request_found: Optional[bool] = None,
        response_found: Optional[bool] = None,
    ):
        super().__init__(message)
        self.identifier = identifier
        self.request_found = request_found
        self.response_found = response_found


class LoadError(MessageBundleError):
    """Loading the generated code of a located package failed."""

    def __init__(self, package: str, cause: BaseException):
        super().__init__(f"Unable to include message package {package} - {cause}")
        self.package = package
        self.cause = cause


class BundleError(MessageBundleError):
    """Flattening failed for a specific package directory or file."""

    def __init__(self, message: str, path: Union[str, Path, None] = None):
        super().__init__(message)
        self.path = path
