"""Chunked input readers for files, stdin and HTTP(S) URLs."""

import sys
import time
from typing import Callable, Iterator

import httpx

from .config import FetchConfig
from .ui import ANSI_DIM, ansi, log

_RETRY_STATUS = (429, 500, 502, 503, 504)


def iter_file(path: str, chunk_size: int = 64 * 1024) -> Iterator[bytes]:
    """Yield the contents of ``path`` in byte chunks. ``-`` reads stdin."""
    if path == "-":
        yield from iter(lambda: sys.stdin.buffer.read(chunk_size), b"")
        return
    with open(path, "rb") as f:
        yield from iter(lambda: f.read(chunk_size), b"")


# Failures worth another attempt. The body may already be partly delivered.
_TRANSIENT = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


def _backoff(config: FetchConfig, failures: int, response: httpx.Response | None = None) -> float:
    delay = config.initial_delay * (2 ** failures)
    retry_after = response.headers.get("retry-after") if response is not None else None
    if retry_after:
        try:
            delay = max(delay, float(retry_after))
        except ValueError:
            pass
    return delay


def iter_url(url: str, config: FetchConfig | None = None,
             client: httpx.Client | None = None,
             log_fn: Callable[[str], None] | None = None) -> Iterator[bytes]:
    """Stream the body of ``url`` in byte chunks.

    Connection failures, timeouts and 429/5xx replies are retried with
    exponential backoff, including failures after part of the body has been
    yielded. A retry asks for the rest with a ``Range`` header; when the
    server answers with the full body instead, the bytes already yielded are
    skipped, so callers never see a byte twice.

    A client passed in is left open.
    """
    config = config or FetchConfig()
    _log = log_fn if log_fn is not None else log
    http = client if client is not None else httpx.Client(
        timeout=httpx.Timeout(config.read_timeout, connect=config.connect_timeout),
        follow_redirects=True,
    )
    received = 0
    failures = 0
    try:
        while True:
            headers = {"Range": f"bytes={received}-"} if received else {}
            try:
                with http.stream("GET", url, headers=headers) as response:
                    response.raise_for_status()
                    skip = received if response.status_code != 206 else 0
                    for chunk in response.iter_bytes(config.chunk_size):
                        if skip:
                            if len(chunk) <= skip:
                                skip -= len(chunk)
                                continue
                            chunk, skip = chunk[skip:], 0
                        received += len(chunk)
                        yield chunk
                return
            except _TRANSIENT as e:
                if failures == config.max_retries:
                    raise
                delay = _backoff(config, failures)
                reason = type(e).__name__
            except httpx.HTTPStatusError as e:
                if e.response.status_code not in _RETRY_STATUS or failures == config.max_retries:
                    raise
                delay = _backoff(config, failures, e.response)
                reason = f"HTTP {e.response.status_code}"
            failures += 1
            resume = f" from byte {received}" if received else ""
            _log(f"  {ansi('↻', ANSI_DIM)} retry {failures}/{config.max_retries}{resume} after {delay:.1f}s: {reason}")
            time.sleep(delay)
    finally:
        if client is None:
            http.close()


def iter_source(source: str, config: FetchConfig | None = None,
                client: httpx.Client | None = None,
                log_fn: Callable[[str], None] | None = None) -> Iterator[bytes]:
    """Yield byte chunks from a URL, a file path, or ``-`` for stdin."""
    if source.startswith(("http://", "https://")):
        return iter_url(source, config, client=client, log_fn=log_fn)
    return iter_file(source, (config or FetchConfig()).chunk_size)
