from fastapi import HTTPException, status
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.platform.response import error_response

PAYLOAD_TOO_LARGE_MESSAGE = "Request body too large"


class BodySizeLimitMiddleware:
    """
    Rejects request bodies larger than ``max_body_size`` bytes.

    A declared Content-Length over the limit is answered with 413 before the
    app runs. Bodies without one are counted while streamed and abort with
    the same 413 once they cross the limit.
    """

    def __init__(self, app: ASGIApp, max_body_size: int):
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_size:
            response = error_response(
                PAYLOAD_TOO_LARGE_MESSAGE,
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    # re-raised by FastAPI's body parsing, rendered by the HTTP exception handler
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=PAYLOAD_TOO_LARGE_MESSAGE,
                    )
            return message

        await self.app(scope, limited_receive, send)
