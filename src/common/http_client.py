"""Shared HTTP helpers used by the Maven repository clients.

Every remote call goes through ``open_request``, which applies an explicit
``RequestConfig`` (method, connect/read timeouts, headers) and guarantees the
response is closed on every exit path. Helpers built on top of it never exit
the process: remote failures are reported to the caller as ``None``/``False``
so a single unreachable host only costs the affected field.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, Iterator, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

# Statuses meaning "the resource is not there"; skipped without a warning.
MISSING_STATUSES = (404, 410)


@dataclass(frozen=True)
class RequestConfig:
    """Explicit configuration for one HTTP request."""
    method: str = "GET"
    connect_timeout: float = Constants.CONNECT_TIMEOUT
    read_timeout: float = Constants.READ_TIMEOUT
    headers: Dict[str, str] = field(default_factory=dict)
    stream: bool = False

    @classmethod
    def for_method(cls, method: str, *, stream: bool = False) -> "RequestConfig":
        """Build a config from the current Constants (honors config-file overrides)."""
        return cls(
            method=method,
            connect_timeout=Constants.CONNECT_TIMEOUT,
            read_timeout=Constants.READ_TIMEOUT,
            headers={"User-Agent": Constants.USER_AGENT},
            stream=stream,
        )

    @property
    def timeout(self) -> Tuple[float, float]:
        """Timeout tuple in the form requests expects."""
        return (self.connect_timeout, self.read_timeout)


def is_success(status_code: int) -> bool:
    """Return True for 2xx status codes."""
    return 200 <= status_code < 300


@contextmanager
def open_request(url: str, config: RequestConfig) -> Iterator[requests.Response]:
    """Perform a request and make sure the connection is released afterwards.

    Transport errors (``requests.RequestException``) propagate to the caller.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action=config.method,
                    target=safe_target,
                )
            )
        response = requests.request(
            config.method,
            url,
            headers=dict(config.headers),
            timeout=config.timeout,
            stream=config.stream,
            allow_redirects=True,
        )
        try:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action=config.method,
                        status_code=response.status_code,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                    )
                )
            yield response
        finally:
            response.close()


def get_bytes(url: str, *, context: str) -> Tuple[int, Optional[bytes]]:
    """GET a document and return ``(status_code, raw_body)``.

    The body is left undecoded so XML parsers can honor the document's own
    encoding declaration. Returns ``(0, None)`` when the request fails at the transport level.
    """
    try:
        with open_request(url, RequestConfig.for_method("GET")) as res:
            if not is_success(res.status_code):
                return res.status_code, None
            return res.status_code, res.content
    except requests.RequestException as exc:
        logger.warning("%s request to %s failed: %s", context, safe_url(url), exc)
        return 0, None


def head_last_modified(url: str, *, context: str) -> Optional[datetime]:
    """HEAD a resource and return its Last-Modified header as a UTC datetime.

    Missing resources, other non-2xx statuses, transport errors and absent or
    unparseable headers all yield None.
    """
    try:
        with open_request(url, RequestConfig.for_method("HEAD")) as res:
            if res.status_code in MISSING_STATUSES:
                return None
            if not is_success(res.status_code):
                logger.debug("%s HEAD %s -> HTTP %s", context, safe_url(url), res.status_code)
                return None
            header = res.headers.get("Last-Modified")
    except requests.RequestException as exc:
        logger.warning("%s HEAD %s failed: %s", context, safe_url(url), exc)
        return None

    if not header:
        return None
    try:
        parsed = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        logger.debug("%s unparseable Last-Modified %r at %s", context, header, safe_url(url))
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def download(url: str, destination: str, *, context: str) -> bool:
    """Stream a resource to ``destination``; return True when it was written."""
    try:
        with open_request(url, RequestConfig.for_method("GET", stream=True)) as res:
            if res.status_code in MISSING_STATUSES:
                return False
            if not is_success(res.status_code):
                logger.debug("%s GET %s -> HTTP %s", context, safe_url(url), res.status_code)
                return False
            with open(destination, "wb") as fh:
                for chunk in res.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
            return True
    except requests.RequestException as exc:
        logger.warning("%s download of %s failed: %s", context, safe_url(url), exc)
        return False
