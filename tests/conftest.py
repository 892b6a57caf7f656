"""Shared fixtures: fake transport sessions and sample files."""

from unittest.mock import MagicMock

import pytest
import requests


def make_response(status: int, body: str = "") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body.encode()
    resp.url = "http://10.0.1.91/remoteupload"
    return resp


def drain(prepared: requests.PreparedRequest, blocksize: int = 4) -> bytes:
    """Pull the request body the way the transport does."""
    body = prepared.body
    if body is None or isinstance(body, bytes):
        return body or b""
    sent = b""
    while chunk := body.read(blocksize):
        sent += chunk
    return sent


@pytest.fixture
def session():
    """A session whose send() reads the body and answers 200."""
    s = MagicMock(spec=requests.Session)
    s.sent_bodies = []

    def _send(prepared, **kwargs):
        s.sent_bodies.append(drain(prepared))
        return make_response(200, "OK")

    s.send.side_effect = _send
    return s


@pytest.fixture
def gcode_file(tmp_path):
    f = tmp_path / "benchy.gcode"
    f.write_bytes(b"; generated\nG28\nG1 X10 Y10\n")
    return f
