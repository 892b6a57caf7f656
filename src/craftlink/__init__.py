"""Craftbot print host client."""

from craftlink.auth import derive_auth_token
from craftlink.craftbot import CraftbotHost
from craftlink.host import (
    PostUploadAction,
    PrintHost,
    Progress,
    TransferOutcome,
    UploadRequest,
    create_print_host,
    make_url,
)

__version__ = "0.1.0"

__all__ = [
    "CraftbotHost",
    "PostUploadAction",
    "PrintHost",
    "Progress",
    "TransferOutcome",
    "UploadRequest",
    "create_print_host",
    "derive_auth_token",
    "make_url",
]
