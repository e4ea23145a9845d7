"""
Locate, load and bundle generated message packages.
"""

from msgbundle.domain.errors import BundleError, LoadError, MessageBundleError, NotFoundError
from msgbundle.message_utils import (
    find_message_files,
    flatten,
    get_handler_for_msg_type,
    get_handler_for_srv_type,
    get_package,
    get_top_level_message_directory,
    load_message_package,
)

__all__ = [
    "BundleError",
    "LoadError",
    "MessageBundleError",
    "NotFoundError",
    "find_message_files",
    "flatten",
    "get_handler_for_msg_type",
    "get_handler_for_srv_type",
    "get_package",
    "get_top_level_message_directory",
    "load_message_package",
]
