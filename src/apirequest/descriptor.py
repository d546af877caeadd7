r"""Request descriptor: the already-built description of one API call."""

from __future__ import annotations

__all__ = ["JWT_BEARER_GRANT_TYPE", "RequestDescriptor"]

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable

# Grant type of the JWT bearer authentication exchange
JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"

# Size of the chunks read from file-like bodies
STREAM_CHUNK_SIZE = 64 * 1024

# Multipart values encoded as plain form fields rather than file parts
_FORM_FIELD_TYPES = (str, bytes, int, float)


@dataclass(frozen=True)
class RequestDescriptor:
    """Description of one intended call.

    At most one of ``body``, ``form`` and ``form_data`` may be set.

    Args:
        url: The target URL, without query string.
        method: The HTTP method. Stored upper-cased.
        headers: Request headers.
        qs: Query parameters appended to the URL.
        body: Raw payload. ``bytes`` and ``str`` are sent as-is, a ``dict``
            or ``list`` is JSON-encoded. Anything else (a file object, an
            iterator or an async iterator of ``bytes``) is streamed; a
            stream can only be read once, so such a request is never
            retried.
        form: Fields sent url-encoded.
        form_data: Multipart fields. ``str``, ``bytes`` and numbers are
            encoded as plain fields; file objects and ``(filename, file)``
            tuples as file parts. A request carrying ``form_data`` cannot
            be resent and is never retried.

    Raises:
        ValueError: If more than one body field is set or the URL is empty.

    Example:
        ```pycon
        >>> from apirequest.descriptor import RequestDescriptor
        >>> descriptor = RequestDescriptor(url="https://api.example.com/files/123", method="get")
        >>> descriptor.method
        'GET'
        >>> descriptor.is_retryable
        True

        ```
    """

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    qs: dict[str, Any] | None = None
    body: Any = None
    form: dict[str, Any] | None = None
    form_data: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if not self.url:
            msg = "url must be a non-empty string"
            raise ValueError(msg)
        bodies = [
            name
            for name in ("body", "form", "form_data")
            if getattr(self, name) is not None
        ]
        if len(bodies) > 1:
            msg = f"body, form and form_data are mutually exclusive, got {', '.join(bodies)}"
            raise ValueError(msg)
        object.__setattr__(self, "method", self.method.upper())

    @property
    def has_stream_body(self) -> bool:
        r"""``True`` if ``body`` is a stream rather than a value."""
        return self.body is not None and not isinstance(self.body, (bytes, str, dict, list))

    @property
    def is_retryable(self) -> bool:
        r"""``False`` if the request carries a multipart or stream body."""
        return self.form_data is None and not self.has_stream_body

    @property
    def is_jwt_grant(self) -> bool:
        r"""``True`` if the request is a JWT bearer-grant token exchange."""
        return self.form is not None and self.form.get("grant_type") == JWT_BEARER_GRANT_TYPE

    def to_httpx_kwargs(self) -> dict[str, Any]:
        """Return the keyword arguments for ``httpx.AsyncClient.build_request``.

        Returns:
            The method, URL, headers, query parameters and the body
            arguments (``content``, ``json``, ``data`` and/or ``files``).
        """
        kwargs: dict[str, Any] = {
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
        }
        if self.qs:
            kwargs["params"] = self.qs
        if isinstance(self.body, (bytes, str)):
            kwargs["content"] = self.body
        elif isinstance(self.body, (dict, list)):
            kwargs["json"] = self.body
        elif self.body is not None:
            kwargs["content"] = _to_async_stream(self.body)
        elif self.form is not None:
            kwargs["data"] = self.form
        elif self.form_data is not None:
            data, files = split_form_data(self.form_data)
            if data:
                kwargs["data"] = data
            kwargs["files"] = files
        return kwargs


def split_form_data(form_data: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split multipart fields into plain fields and file parts.

    Args:
        form_data: The multipart fields.

    Returns:
        The ``(data, files)`` arguments for httpx. httpx only
        multipart-encodes a body that has file parts, so when there are
        none the plain fields are returned as file parts without filename,
        which encodes them the same way.

    Example:
        ```pycon
        >>> from apirequest.descriptor import split_form_data
        >>> split_form_data({"attributes": '{"name": "a.txt"}', "file": ("a.txt", b"x")})
        ({'attributes': '{"name": "a.txt"}'}, {'file': ('a.txt', b'x')})
        >>> split_form_data({"name": "a.txt"})
        ({}, {'name': (None, 'a.txt')})

        ```
    """
    data: dict[str, Any] = {}
    files: dict[str, Any] = {}
    for name, value in form_data.items():
        if isinstance(value, _FORM_FIELD_TYPES):
            data[name] = value
        else:
            files[name] = value
    if files:
        return data, files
    return {}, {
        name: (None, value if isinstance(value, (str, bytes)) else str(value))
        for name, value in data.items()
    }


def _to_async_stream(body: Any) -> Any:
    if hasattr(body, "__aiter__"):
        return body
    if hasattr(body, "read"):
        return _aiter_file(body)
    return _aiter_chunks(body)


async def _aiter_file(fileobj: Any) -> AsyncIterator[bytes]:
    while chunk := fileobj.read(STREAM_CHUNK_SIZE):
        yield chunk.encode() if isinstance(chunk, str) else chunk


async def _aiter_chunks(chunks: Iterable[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk
