"""Upload files to a Craftbot printer through its embedded HTTP server.

The printer exposes a single ``/remoteupload`` endpoint. GET checks that
the device is reachable and accepts our credentials; POST takes the raw
file bytes with the target file name in a ``Name`` header.
"""

from __future__ import annotations

import logging
from gettext import gettext as _
from pathlib import Path
from urllib.parse import urlsplit

import requests

from craftlink.auth import derive_auth_token
from craftlink.host import (
    DEFAULT_TIMEOUT,
    ErrorFn,
    InfoFn,
    PostUploadAction,
    Progress,
    ProgressFn,
    TransferOutcome,
    UploadRequest,
    format_error,
    make_url,
)

log = logging.getLogger(__name__)

UPLOAD_ENDPOINT = "remoteupload"
# The firmware only accepts requests from its own desktop client.
USER_AGENT = "CraftWare"


class UploadCancelled(Exception):
    """Raised from the request body when the progress callback asks to stop."""


class _ProgressReader:
    """File-like request body that reports progress before each read.

    The transport pulls the body through ``read()``, so raising here stops
    the transfer before the next chunk reaches the socket.
    """

    def __init__(self, data: bytes, progress_fn: ProgressFn | None = None):
        self._data = data
        self._pos = 0
        self._progress_fn = progress_fn

    def __len__(self) -> int:
        return len(self._data)

    def read(self, size: int | None = -1) -> bytes:
        total = len(self._data)
        if self._progress_fn is not None and self._progress_fn(Progress(self._pos, total)):
            raise UploadCancelled
        if size is None or size < 0:
            size = total - self._pos
        chunk = self._data[self._pos : self._pos + size]
        self._pos += len(chunk)
        return chunk


def _error_parts(exc: requests.RequestException) -> tuple[str, str, int]:
    """Split a transport exception into (body, error, status)."""
    resp = exc.response
    if resp is None:
        return "", str(exc), 0
    return resp.text, str(exc), resp.status_code


class CraftbotHost:
    """Print host backend for Craftbot printers."""

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self._host = host
        self._username = username
        self._password = password
        self.timeout = timeout
        self._session = session

    @property
    def host(self) -> str:
        return self._host

    @property
    def username(self) -> str:
        return self._username

    def get_name(self) -> str:
        return "Craftbot"

    def get_host(self) -> str:
        return self._host

    def has_auto_discovery(self) -> bool:
        return False

    def can_test(self) -> bool:
        return True

    def get_post_upload_actions(self) -> PostUploadAction:
        return PostUploadAction.START_PRINT

    def get_test_ok_msg(self) -> str:
        return _("Craftbot device is reachable.")

    def get_test_failed_msg(self, msg: str) -> str:
        return _("Could not reach Craftbot device: %s") % msg

    def make_url(self, path: str) -> str:
        return make_url(self._host, path)

    def _send(self, prepared: requests.PreparedRequest) -> requests.Response:
        """Send a prepared request and raise for non-2xx responses.

        Requests are prepared standalone, so no session default headers
        (``Accept``, ``User-Agent``) are merged in.
        """
        if self._session is not None:
            resp = self._session.send(prepared, timeout=self.timeout, allow_redirects=False)
        else:
            with requests.Session() as session:
                resp = session.send(prepared, timeout=self.timeout, allow_redirects=False)
        if not 200 <= resp.status_code < 300:
            # redirects are not followed, so 3xx also ends the exchange
            raise requests.HTTPError(f"{resp.status_code} {resp.reason}", response=resp)
        return resp

    def test(self) -> TransferOutcome:
        """Check that the device answers on the upload endpoint."""
        url = self.make_url(UPLOAD_ENDPOINT)
        log.info("%s: Testing connection to %s", self.get_name(), url)

        prepared = requests.Request(
            "GET",
            url,
            headers={
                "Authorization": derive_auth_token(self._username, self._password),
                "User-Agent": USER_AGENT,
            },
        ).prepare()
        try:
            resp = self._send(prepared)
        except requests.RequestException as e:
            msg = format_error(*_error_parts(e))
            log.info("%s: Connection test failed: %s", self.get_name(), msg)
            return TransferOutcome(success=False, error=msg)

        log.debug("%s: GET %s succeeded. Status: %d", self.get_name(), url, resp.status_code)
        return TransferOutcome(success=True)

    def upload(
        self,
        request: UploadRequest,
        progress_fn: ProgressFn | None = None,
        error_fn: ErrorFn | None = None,
        info_fn: InfoFn | None = None,
    ) -> bool:
        """Send a file to the printer.

        Returns True on success. Failures are reported through ``error_fn``;
        a cancellation from ``progress_fn`` returns False without reporting.
        """
        auth = derive_auth_token(self._username, self._password)

        source = Path(request.source_path)
        try:
            data = source.read_bytes()
        except OSError as e:
            log.error("%s: Cannot read %s: %s", self.get_name(), source, e)
            if error_fn is not None:
                error_fn(f"Failed to open file: {source}")
            return False
        log.info("%s: Read %d bytes for upload.", self.get_name(), len(data))
        if request.post_action & PostUploadAction.START_PRINT:
            # /remoteupload has no start flag; the print is started on the device
            log.warning("%s: Print start must be confirmed on the printer.", self.get_name())

        url = self.make_url(UPLOAD_ENDPOINT)
        headers = {
            "Content-Type": "application/octet-stream",
            "Content-Length": str(len(data)),
            "Name": request.upload_name,
            "Authorization": auth,
            "User-Agent": USER_AGENT,
            "Host": urlsplit(url).netloc,
            "Cache-Control": "no-cache",
        }
        prepared = requests.Request(
            "POST", url, headers=headers, data=_ProgressReader(data, progress_fn)
        ).prepare()

        try:
            if not data and progress_fn is not None and progress_fn(Progress(0, 0)):
                # an empty body is never read by the transport
                raise UploadCancelled
            resp = self._send(prepared)
        except UploadCancelled:
            log.info("%s: Upload canceled by user.", self.get_name())
            return False
        except requests.RequestException as e:
            body, error, status = _error_parts(e)
            log.error(
                "%s: Upload failed. HTTP %d, error: %s, body: %s",
                self.get_name(), status, error, body,
            )
            if error_fn is not None:
                error_fn(format_error(body, error, status))
            return False

        log.info("%s: Upload complete. HTTP %d", self.get_name(), resp.status_code)
        if info_fn is not None:
            info_fn("craftbot", _("Upload successful"))
        return True
