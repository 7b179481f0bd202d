"""Single request primitive for the Kudu REST API.

Every public operation ends up here: the dispatcher joins the site's base URL
with a relative endpoint, attaches the fixed header set and sends exactly one
request through ``urllib``. Payload handling is selected by a request shape.
"""

from __future__ import annotations

import contextlib
import http.client
import json
import logging
import os
import shutil
from dataclasses import dataclass, field
from typing import Any
from urllib import request as urllib_request
from urllib.error import HTTPError, URLError

from kudu_vfs import __version__

logger = logging.getLogger(__name__)

HOST_SUFFIX = "scm.azurewebsites.net"
API_PREFIX = "api/"
CONTENT_TYPE = "application/json"
USER_AGENT = f"kudu-vfs-python/{__version__}"
IF_MATCH_ANY = "*"

# Kudu error bodies
FIELD_MESSAGE = "Message"
FIELD_EXCEPTION_MESSAGE = "ExceptionMessage"


class KuduTransportError(Exception):
    """Raised when a request to the Kudu API cannot be completed."""


class KuduApiError(KuduTransportError):
    """Raised when the Kudu API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Kudu API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


# ---------------------------------------------------------------------------
# Request shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoPayload:
    """Request with no body whose response is returned in memory.

    JSON responses are decoded unless ``decode_json`` is False, in which case
    the raw body bytes are returned.
    """

    decode_json: bool = True


@dataclass(frozen=True)
class JsonBody:
    """Request whose body is a JSON-serialized payload."""

    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FileUpload:
    """Request whose body is streamed from a local file."""

    local_path: str | os.PathLike[str]


@dataclass(frozen=True)
class FileDownload:
    """Request whose response body is streamed to a local file."""

    local_path: str | os.PathLike[str]


RequestShape = NoPayload | JsonBody | FileUpload | FileDownload

NO_PAYLOAD = NoPayload()


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------


def base_url(site: str) -> str:
    """Return the SCM base URL for a site, e.g. ``https://mysite.scm.azurewebsites.net/``."""
    return f"https://{site}.{HOST_SUFFIX}/"


def build_url(site: str, relative_endpoint: str) -> str:
    """Join the API root of ``site`` with ``relative_endpoint``."""
    return f"{base_url(site)}{API_PREFIX}{relative_endpoint}"


def build_headers(token: str) -> dict[str, str]:
    """Return the header set sent with every request."""
    return {
        "Authorization": f"Basic {token}",
        "If-Match": IF_MATCH_ANY,
        "Content-Type": CONTENT_TYPE,
        "User-Agent": USER_AGENT,
    }


def dispatch(
    site: str,
    token: str,
    verb: str,
    relative_endpoint: str,
    shape: RequestShape = NO_PAYLOAD,
) -> Any:
    """Send one request to the Kudu API of ``site``.

    Args:
        site: Site name; the host is ``<site>.scm.azurewebsites.net``.
        token: Base64 Basic auth token, sent verbatim.
        verb: HTTP method (GET, PUT, POST or DELETE).
        relative_endpoint: Endpoint appended to ``.../api/`` (e.g. ``vfs/site/``).
        shape: Payload variant of the request.

    Returns:
        None for ``FileDownload``; otherwise the decoded JSON body when the
        response is JSON, or the raw body bytes.

    Raises:
        KuduApiError: If the API returns a non-2xx status code.
        KuduTransportError: If the request fails before a response is received.
        TypeError: If ``shape`` is not a known request shape.
    """
    url = build_url(site, relative_endpoint)
    headers = build_headers(token)
    logger.debug(
        "[dispatch] sending request; verb:%s;endpoint:%s;shape:%s",
        verb,
        relative_endpoint,
        type(shape).__name__,
    )

    if isinstance(shape, NoPayload):
        req = urllib_request.Request(url, headers=headers, method=verb)
        return _send(req, decode_json=shape.decode_json)

    if isinstance(shape, JsonBody):
        data = json.dumps(shape.payload).encode("utf-8")
        req = urllib_request.Request(url, data=data, headers=headers, method=verb)
        return _send(req)

    if isinstance(shape, FileUpload):
        headers["Content-Length"] = str(os.path.getsize(shape.local_path))
        with open(shape.local_path, "rb") as fh:
            req = urllib_request.Request(url, data=fh, headers=headers, method=verb)
            return _send(req)

    if isinstance(shape, FileDownload):
        req = urllib_request.Request(url, headers=headers, method=verb)
        return _send(req, out_file=shape.local_path)

    raise TypeError(f"unsupported request shape: {type(shape).__name__}")


def _send(
    req: urllib_request.Request,
    out_file: str | os.PathLike[str] | None = None,
    decode_json: bool = True,
) -> Any:
    """Perform the request and return or stream the response body."""
    try:
        with urllib_request.urlopen(req) as resp:
            if out_file is not None:
                _stream_to_file(resp, out_file)
                return None
            body = resp.read()
            content_type = resp.headers.get("Content-Type", "") or ""
    except HTTPError as exc:
        detail = _error_detail(exc)
        logger.error(
            "[dispatch] request rejected; verb:%s;url:%s;status:%d",
            req.get_method(),
            req.full_url,
            exc.code,
        )
        raise KuduApiError(exc.code, detail) from exc
    except (URLError, http.client.HTTPException, ConnectionError, TimeoutError) as exc:
        logger.error(
            "[dispatch] request failed; verb:%s;url:%s;error:%s",
            req.get_method(),
            req.full_url,
            exc,
        )
        raise KuduTransportError(f"{req.get_method()} {req.full_url} failed: {exc}") from exc

    if decode_json and body and "json" in content_type:
        return json.loads(body)
    return body


def _stream_to_file(resp: Any, out_file: str | os.PathLike[str]) -> None:
    """Copy the response body to ``out_file`` via a ``.part`` sibling.

    ``out_file`` only appears once the whole body has been written; a broken
    stream leaves neither a truncated target nor the partial file behind.
    """
    partial = f"{os.fspath(out_file)}.part"
    try:
        with open(partial, "wb") as fh:
            shutil.copyfileobj(resp, fh)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.remove(partial)
        raise
    os.replace(partial, out_file)


def _error_detail(exc: HTTPError) -> str:
    """Extract a human-readable message from a Kudu error response."""
    raw = exc.read() or b""
    try:
        parsed = json.loads(raw)
        return str(
            parsed.get(FIELD_EXCEPTION_MESSAGE) or parsed.get(FIELD_MESSAGE) or exc.reason
        )
    except (ValueError, AttributeError):
        text = raw.decode("utf-8", errors="replace").strip()
        return text or str(exc.reason)
