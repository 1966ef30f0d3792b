"""
Request and Response values.

Request is the immutable result of the builder and the only thing that is
transmitted. Response wraps whichever transport produced it (requests for
HTTP/1.1, httpx for HTTP/2) behind one read-once interface.
"""

import contextlib
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterator, List, Mapping, Optional, Tuple, Union

from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers

from .config import HttpMethod
from .exceptions import TimeoutError, TransportError


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MULTIPART
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class FilePart:
    """Multipart field whose content is a file on disk."""
    name: str
    path: Path


@dataclass(frozen=True)
class TextPart:
    """Multipart field with plain text content."""
    name: str
    value: str


MultipartField = Union[FilePart, TextPart]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class Request:
    """
    Fully built request.

    Args:
        method: Resolved HTTP method
        url: Absolute URL
        headers: Header map (case-sensitive keys, insertion order)
        body: Literal body, a file to stream, or None
        multipart: Multipart fields; when present they are the payload
        timeout: Request-scoped timeout overriding the client default
    """
    method: HttpMethod
    url: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: Optional[Union[str, Path]] = None
    multipart: Tuple[MultipartField, ...] = ()
    timeout: Optional[float] = None

    def __post_init__(self):
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))
        if not isinstance(self.multipart, tuple):
            object.__setattr__(self, 'multipart', tuple(self.multipart))

    @property
    def is_multipart(self) -> bool:
        return bool(self.multipart)

    @contextlib.contextmanager
    def open_payload(self) -> Iterator[Tuple[Any, Optional[List[Tuple[str, Tuple[Optional[str], Any]]]]]]:
        """
        Open the payload for sending.

        Yields a ``(data, files)`` pair in the shape both requests and httpx
        accept. File handles are closed when the context exits.

        Example:
            >>> with request.open_payload() as (data, files):
            ...     session.request(..., data=data, files=files)
        """
        with contextlib.ExitStack() as stack:
            if self.multipart:
                files = []
                for part in self.multipart:
                    if isinstance(part, FilePart):
                        handle = stack.enter_context(open(part.path, 'rb'))
                        files.append((part.name, (part.path.name, handle)))
                    else:
                        files.append((part.name, (None, part.value)))
                yield None, files
            elif isinstance(self.body, Path):
                yield stack.enter_context(open(self.body, 'rb')), None
            elif self.body is not None:
                yield self.body.encode('utf-8'), None
            else:
                yield None, None



# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RESPONSE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Response:
    """
    Read-only view of an HTTP response.

    The body is a one-shot stream: iterate it with ``iter_bytes()`` or read it
    all with ``content``/``text``, not both.

    The overall deadline is enforced by a timer while the body is read: when
    it fires, ``abort`` unblocks the reader and reading fails with
    TimeoutError, whether or not the server keeps trickling data.
    """

    def __init__(
        self,
        status_code: int,
        reason: str,
        http_version: str,
        headers: Mapping[str, str],
        url: str,
        chunks: Iterator[bytes],
        close: Optional[Callable[[], None]] = None,
        abort: Optional[Callable[[], None]] = None,
        deadline: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            status_code: HTTP status
            reason: Reason phrase
            http_version: e.g. "1.1" or "2"
            headers: Response headers in received order
            url: Final URL (after redirects)
            chunks: Body chunk iterator from the transport
            close: Callback releasing the underlying connection
            abort: Callback interrupting a blocked read (called from the timer thread)
            deadline: time.monotonic() value after which reading fails
            timeout: Configured timeout, for the error message
        """
        self.status_code = status_code
        self.reason = reason
        self.http_version = http_version
        self.headers = CaseInsensitiveDict(headers)
        self.url = url
        self._chunks = chunks
        self._close = close
        self._abort = abort
        self._deadline = deadline
        self._timeout = timeout
        self._timer: Optional[threading.Timer] = None
        self._expired = False
        self._consumed = False
        self._content: Optional[bytes] = None

    @property
    def ok(self) -> bool:
        """True for 2xx."""
        return 200 <= self.status_code < 300

    @property
    def status_line(self) -> str:
        return f"HTTP/{self.http_version} {self.status_code} {self.reason}".rstrip()

    @property
    def encoding(self) -> str:
        """Charset from Content-Type, UTF-8 when the header names none."""
        return get_encoding_from_headers(self.headers) or 'utf-8'

    def _timeout_error(self) -> TimeoutError:
        return TimeoutError("Response body read timeout", self.url, self._timeout)

    def _start_timer(self) -> None:
        if self._deadline is None:
            return

        remaining = self._deadline - time.monotonic()
        if remaining <= 0:
            self._expired = True
            raise self._timeout_error()

        self._timer = threading.Timer(remaining, self._expire)
        self._timer.daemon = True
        self._timer.start()

    def _expire(self) -> None:
        self._expired = True
        if self._abort is not None:
            self._abort()

    def iter_bytes(self) -> Iterator[bytes]:
        """
        Stream the body.

        Raises:
            RuntimeError: If the body was already consumed
            TimeoutError: If the overall deadline expires before the body is read
            TransportError: If the connection fails while reading
        """
        if self._consumed:
            raise RuntimeError("response body already consumed")
        self._consumed = True

        try:
            self._start_timer()
            for chunk in self._chunks:
                if self._expired:
                    raise self._timeout_error()
                if chunk:
                    yield chunk
            # a reader cut off by abort() may see a clean EOF
            if self._expired:
                raise self._timeout_error()
        except TransportError as e:
            if self._expired and not isinstance(e, TimeoutError):
                raise self._timeout_error() from e
            raise
        finally:
            self.close()

    @property
    def content(self) -> bytes:
        """Whole body as bytes (reads the stream on first access)."""
        if self._content is None:
            self._content = b"".join(self.iter_bytes())
        return self._content

    @property
    def text(self) -> str:
        """Body decoded with the charset from Content-Type."""
        try:
            return self.content.decode(self.encoding, errors='replace')
        except LookupError:
            return self.content.decode('utf-8', errors='replace')

    def close(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._close is not None:
            close, self._close = self._close, None
            close()

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"
