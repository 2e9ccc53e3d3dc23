from __future__ import annotations

import asyncio

import orjson
from pydantic import ValidationError
from websockets.exceptions import InvalidStatus, WebSocketException

# 역직렬화/envelope 불일치 (MalformedMessage: normalize 내부에서 None으로 흡수)
MALFORMED_MESSAGE_ERRORS = (
    orjson.JSONDecodeError,
    ValueError,
    TypeError,
    KeyError,
    IndexError,
    AttributeError,
    ValidationError,
)

# 소켓/웹소켓 등 (TransportError: on_error 통지 후 재연결 대상)
SOCKET_EXCEPTIONS = (
    asyncio.TimeoutError,
    InvalidStatus,
    WebSocketException,
    OSError,
    TimeoutError,
)
