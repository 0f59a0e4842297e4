"""Tests for the chunked input readers."""

import io
import sys

import httpx
import pytest

from reflow import FetchConfig, iter_file, iter_source, iter_url

NO_WAIT = FetchConfig(initial_delay=0.0, max_retries=2, chunk_size=4)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class DroppedStream(httpx.SyncByteStream):
    """Delivers the first ``cut`` bytes of ``data``, then drops the connection."""

    def __init__(self, data: bytes, cut: int):
        self.data = data
        self.cut = cut

    def __iter__(self):
        yield self.data[:self.cut]
        raise httpx.ReadError("connection reset by peer")


def _range_start(request: httpx.Request) -> int:
    value = request.headers.get("range", "bytes=0-")
    return int(value.removeprefix("bytes=").rstrip("-"))


class TestFiles:

    def test_reads_in_chunks(self, tmp_path):
        path = tmp_path / "in.txt"
        path.write_bytes(b"hello world")
        chunks = list(iter_file(str(path), chunk_size=4))
        assert chunks == [b"hell", b"o wo", b"rld"]

    def test_dash_reads_stdin(self, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"from stdin")))
        assert b"".join(iter_file("-")) == b"from stdin"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(iter_file(str(tmp_path / "nope.txt")))

    def test_source_dispatches_paths(self, tmp_path):
        path = tmp_path / "in.txt"
        path.write_bytes(b"abc")
        assert b"".join(iter_source(str(path))) == b"abc"


class TestUrls:

    def test_streams_body(self):
        client = _client(lambda request: httpx.Response(200, content=b"remote text body"))
        chunks = list(iter_url("http://example.test/doc.txt", NO_WAIT, client=client))
        assert b"".join(chunks) == b"remote text body"

    def test_source_dispatches_urls(self):
        client = _client(lambda request: httpx.Response(200, content=b"via url"))
        out = b"".join(iter_source("https://example.test/a", NO_WAIT, client=client))
        assert out == b"via url"

    def test_retries_server_errors(self):
        calls = []
        logged = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503, headers={"retry-after": "0"})
            return httpx.Response(200, content=b"ok")

        chunks = iter_url("http://example.test/", NO_WAIT, client=_client(handler),
                          log_fn=logged.append)
        assert b"".join(chunks) == b"ok"
        assert len(calls) == 2
        assert len(logged) == 1
        assert "HTTP 503" in logged[0]

    def test_client_error_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        with pytest.raises(httpx.HTTPStatusError):
            list(iter_url("http://example.test/missing", NO_WAIT, client=_client(handler)))
        assert len(calls) == 1

    def test_connect_error_gives_up(self):
        calls = []
        logged = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.ConnectError):
            list(iter_url("http://example.test/", NO_WAIT, client=_client(handler),
                          log_fn=logged.append))
        assert len(calls) == NO_WAIT.max_retries + 1
        assert len(logged) == NO_WAIT.max_retries

    def test_passed_client_left_open(self):
        client = _client(lambda request: httpx.Response(200, content=b"x"))
        list(iter_url("http://example.test/", NO_WAIT, client=client))
        assert not client.is_closed

    def test_resumes_with_range_after_dropped_body(self):
        body = b"0123456789abcdefghij"
        ranges = []
        logged = []

        def handler(request):
            start = _range_start(request)
            ranges.append(request.headers.get("range"))
            if start == 0:
                return httpx.Response(200, stream=DroppedStream(body, 10))
            return httpx.Response(206, content=body[start:])

        chunks = iter_url("http://example.test/big.txt", NO_WAIT, client=_client(handler),
                          log_fn=logged.append)
        assert b"".join(chunks) == body
        assert ranges[0] is None
        assert ranges[1].startswith("bytes=")
        assert len(logged) == 1
        assert "from byte" in logged[0]
        assert "ReadError" in logged[0]

    def test_skips_delivered_bytes_when_range_ignored(self):
        body = b"0123456789abcdefghij"
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(200, stream=DroppedStream(body, 10))
            return httpx.Response(200, content=body)

        chunks = iter_url("http://example.test/big.txt", NO_WAIT, client=_client(handler),
                          log_fn=lambda msg: None)
        assert b"".join(chunks) == body
        assert len(calls) == 2

    def test_dropped_body_gives_up_after_max_retries(self):
        body = b"0123456789abcdefghij"

        def handler(request):
            return httpx.Response(200, stream=DroppedStream(body[_range_start(request):], 2))

        with pytest.raises(httpx.ReadError):
            list(iter_url("http://example.test/big.txt", NO_WAIT, client=_client(handler),
                          log_fn=lambda msg: None))
