"""Types and helpers shared by print host backends."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

DEFAULT_TIMEOUT = 30.0


class PostUploadAction(enum.Flag):
    NONE = 0
    START_PRINT = enum.auto()
    START_SIMULATION = enum.auto()
    QUEUE_PRINT = enum.auto()


@dataclass(frozen=True)
class UploadRequest:
    source_path: Path
    upload_path: Path  # only the file name is presented to the device
    post_action: PostUploadAction = PostUploadAction.NONE

    @property
    def upload_name(self) -> str:
        return Path(self.upload_path).name


@dataclass(frozen=True)
class Progress:
    transferred: int
    total: int


@dataclass(frozen=True)
class TransferOutcome:
    success: bool
    error: str | None = None

    def __bool__(self) -> bool:
        return self.success


# Return a truthy value to cancel the transfer.
ProgressFn = Callable[[Progress], bool | None]
ErrorFn = Callable[[str], None]
InfoFn = Callable[[str, str], None]


class PrintHost(Protocol):
    """Capabilities every print host backend provides."""

    def get_name(self) -> str: ...

    def get_host(self) -> str: ...

    def test(self) -> TransferOutcome: ...

    def get_test_ok_msg(self) -> str: ...

    def get_test_failed_msg(self, msg: str) -> str: ...

    def upload(
        self,
        request: UploadRequest,
        progress_fn: ProgressFn | None = None,
        error_fn: ErrorFn | None = None,
        info_fn: InfoFn | None = None,
    ) -> bool: ...

    def has_auto_discovery(self) -> bool: ...

    def can_test(self) -> bool: ...

    def get_post_upload_actions(self) -> PostUploadAction: ...


def make_url(host: str, path: str) -> str:
    """Join a configured host and an endpoint path into a request URL.

    Hosts carrying an http(s) scheme are used as the base URL as-is;
    bare addresses get ``http://`` prepended.
    """
    if host.startswith(("http://", "https://")):
        return host + path if host.endswith("/") else f"{host}/{path}"
    return f"http://{host}/{path}"


def format_error(body: str, error: str, status: int) -> str:
    """Build a user-facing message from a failed HTTP exchange.

    With an HTTP status the response body is shown (or the transport error
    when the body is empty); without one only the transport error is known.
    """
    if status:
        return f"HTTP {status}: {body or error}"
    return error


def create_print_host(
    host_type: str, host: str, username: str, password: str, **kwargs
) -> PrintHost:
    """Return the backend registered for ``host_type``."""
    if host_type == "craftbot":
        from craftlink.craftbot import CraftbotHost

        return CraftbotHost(host, username, password, **kwargs)
    raise ValueError(f"Unknown print host type: '{host_type}'. Supported: ['craftbot']")
