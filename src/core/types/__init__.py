from src.core.types._common_types import (
    ConnectionStatus,
    DelayOption,
    ExchangeId,
    OrderSide,
    OrderType,
    RawLevel,
    RawMessage,
    SubscriptionPayload,
    connection_status_format,
)
from src.core.types._exception_types import ErrorKind

__all__ = [
    "ConnectionStatus",
    "DelayOption",
    "ErrorKind",
    "ExchangeId",
    "OrderSide",
    "OrderType",
    "RawLevel",
    "RawMessage",
    "SubscriptionPayload",
    "connection_status_format",
]
