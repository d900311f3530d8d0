"""ASGI response sending: the engine's raw response sink.

``ASGIResponse`` is the ``RawResponse`` the trie engine hands to each
route. It translates one (status, headers, body) triple into the two
ASGI messages of a complete HTTP response.
"""

from collections.abc import Sequence

from waypoint._internal.asgi import Send


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


class ASGIResponse:
    """Single-shot response over an ASGI ``send`` callable."""

    __slots__ = ("_send", "_started", "method")

    def __init__(self, send: Send, method: str = "GET") -> None:
        self._send = send
        self._started = False
        self.method = method

    @property
    def started(self) -> bool:
        return self._started

    async def send(
        self,
        status: int,
        headers: Sequence[tuple[str, str]],
        body: bytes,
    ) -> None:
        if self._started:
            msg = "A response has already been sent for this request."
            raise RuntimeError(msg)
        self._started = True

        if not _body_allowed(status):
            body = b""
        raw_headers: list[tuple[bytes, bytes]] = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in headers
            if name.lower() != "content-length"
        ]
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

        await self._send(
            {
                "type": "http.response.start",
                "status": status,
                "headers": raw_headers,
            }
        )
        await self._send(
            {
                "type": "http.response.body",
                # HEAD keeps the content-length of the full body but sends none
                "body": b"" if self.method == "HEAD" else body,
            }
        )
