"""Tests for Request and Response values."""

import threading
import time

import pytest

from rq_cli.core.config import HttpMethod
from rq_cli.core.exceptions import TimeoutError, TransportError
from rq_cli.core.models import (
    FilePart,
    Request,
    Response,
    TextPart,
)


def make_response(chunks=(b"hello",), headers=None, status_code=200, reason="OK", **kwargs):
    return Response(
        status_code=status_code,
        reason=reason,
        http_version="1.1",
        headers=headers or {"Content-Type": "text/plain"},
        url="https://example.com/",
        chunks=iter(chunks),
        **kwargs
    )


class TestRequest:
    """Tests for Request."""

    def test_headers_are_read_only(self):
        """Headers cannot be changed after build."""
        request = Request(method=HttpMethod.GET, url="https://example.com", headers={"A": "1"})

        with pytest.raises(TypeError):
            request.headers["B"] = "2"

    def test_is_multipart(self):
        request = Request(
            method=HttpMethod.POST,
            url="https://example.com",
            multipart=[TextPart("note", "hi")],
        )

        assert request.is_multipart
        assert isinstance(request.multipart, tuple)

    def test_payload_none(self):
        request = Request(method=HttpMethod.GET, url="https://example.com")

        with request.open_payload() as (data, files):
            assert data is None
            assert files is None

    def test_payload_literal_body_is_utf8(self):
        request = Request(method=HttpMethod.POST, url="https://example.com", body="héllo")

        with request.open_payload() as (data, files):
            assert data == "héllo".encode("utf-8")
            assert files is None

    def test_payload_file_body_is_streamed(self, tmp_path):
        """File body is passed as an open binary handle and closed afterwards."""
        body = tmp_path / "body.bin"
        body.write_bytes(b"\x00\x01payload")
        request = Request(method=HttpMethod.PUT, url="https://example.com", body=body)

        with request.open_payload() as (data, files):
            assert data.read() == b"\x00\x01payload"
            assert files is None
            handle = data

        assert handle.closed

    def test_payload_multipart(self, tmp_path):
        upload = tmp_path / "report.csv"
        upload.write_text("a,b\n")
        request = Request(
            method=HttpMethod.POST,
            url="https://example.com",
            multipart=(FilePart("file", upload), TextPart("note", "weekly")),
        )

        with request.open_payload() as (data, files):
            assert data is None
            assert files[0][0] == "file"
            assert files[0][1][0] == "report.csv"
            assert files[0][1][1].read() == b"a,b\n"
            assert files[1] == ("note", (None, "weekly"))


class TestEncoding:
    """Tests for Response.encoding."""

    def test_charset_from_content_type(self):
        response = make_response(headers={"content-type": "text/html; charset=ISO-8859-1"})
        assert response.encoding == "ISO-8859-1"

    def test_quoted_charset(self):
        response = make_response(headers={"Content-Type": 'text/plain; charset="koi8-r"'})
        assert response.encoding == "koi8-r"

    def test_text_without_charset_is_latin1(self):
        assert make_response(headers={"Content-Type": "text/plain"}).encoding == "ISO-8859-1"

    def test_json_is_utf8(self):
        assert make_response(headers={"Content-Type": "application/json"}).encoding == "utf-8"

    def test_no_content_type_is_utf8(self):
        assert make_response(headers={"X-Id": "1"}).encoding == "utf-8"


class TestResponse:
    """Tests for Response."""

    def test_ok(self):
        assert make_response(status_code=204).ok
        assert not make_response(status_code=404, reason="Not Found").ok

    def test_status_line(self):
        assert make_response().status_line == "HTTP/1.1 200 OK"
        assert make_response(status_code=299, reason="").status_line == "HTTP/1.1 299"

    def test_headers_case_insensitive(self):
        response = make_response(headers={"Content-Type": "text/plain", "X-Id": "7"})

        assert response.headers["x-id"] == "7"
        assert response.headers.get("missing", "-") == "-"
        assert list(response.headers) == ["Content-Type", "X-Id"]

    def test_content_joins_chunks(self):
        response = make_response(chunks=[b"he", b"", b"llo"])

        assert response.content == b"hello"
        # cached
        assert response.content == b"hello"

    def test_text_uses_charset(self):
        response = make_response(
            chunks=["привет".encode("cp1251")],
            headers={"Content-Type": "text/plain; charset=windows-1251"},
        )

        assert response.text == "привет"

    def test_text_unknown_charset_falls_back_to_utf8(self):
        response = make_response(
            chunks=["ok".encode("utf-8")],
            headers={"Content-Type": "text/plain; charset=bogus-charset"},
        )

        assert response.text == "ok"

    def test_iter_bytes_once(self):
        """Body stream is one-shot."""
        response = make_response()
        list(response.iter_bytes())

        with pytest.raises(RuntimeError, match="already consumed"):
            list(response.iter_bytes())

    def test_close_called_after_read(self):
        closed = []
        response = make_response(close=lambda: closed.append(True))

        assert response.content == b"hello"
        assert closed == [True]

        # idempotent
        response.close()
        assert closed == [True]

    def test_deadline_expired_while_reading(self):
        """Total timeout covers reading the body."""
        response = make_response(
            chunks=[b"a", b"b"],
            deadline=time.monotonic() - 1,
            timeout=5.0,
        )

        with pytest.raises(TimeoutError) as exc_info:
            response.content

        assert exc_info.value.timeout == 5.0
        assert "https://example.com/" in str(exc_info.value)

    def test_deadline_expired_before_empty_body(self):
        """An empty body still fails when the deadline has already passed."""
        closed = []
        response = make_response(
            chunks=[],
            close=lambda: closed.append(True),
            deadline=time.monotonic() - 1,
            timeout=5.0,
        )

        with pytest.raises(TimeoutError):
            response.content
        assert closed == [True]

    def test_deadline_interrupts_blocked_read(self):
        """The deadline fires while the transport is still waiting for data."""
        aborted = threading.Event()

        def chunks():
            yield b"a"
            # the transport stays blocked until the connection is torn down
            aborted.wait(10)
            raise TransportError("Request failed: connection closed", "https://example.com/")

        response = make_response(
            chunks=chunks(),
            abort=aborted.set,
            deadline=time.monotonic() + 0.2,
            timeout=0.2,
        )

        start = time.monotonic()
        with pytest.raises(TimeoutError) as exc_info:
            response.content

        assert time.monotonic() - start < 2
        assert aborted.is_set()
        assert isinstance(exc_info.value.__cause__, TransportError)

    def test_deadline_clean_eof_after_abort(self):
        """A read that ends quietly after the abort is still a timeout."""
        aborted = threading.Event()

        def chunks():
            yield b"a"
            aborted.wait(10)

        response = make_response(
            chunks=chunks(),
            abort=aborted.set,
            deadline=time.monotonic() + 0.2,
            timeout=0.2,
        )

        with pytest.raises(TimeoutError):
            response.content

    def test_timer_cancelled_on_close(self):
        aborted = []
        response = make_response(
            abort=lambda: aborted.append(True),
            deadline=time.monotonic() + 0.2,
            timeout=0.2,
        )

        assert response.content == b"hello"
        time.sleep(0.4)
        assert aborted == []

    def test_repr(self):
        assert repr(make_response(status_code=201, reason="Created")) == "<Response [201]>"
