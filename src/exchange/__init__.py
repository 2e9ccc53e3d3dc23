from src.exchange.registry import (
    available_symbols,
    build_subscription,
    default_symbol,
    encode_subscription,
    endpoint,
    get_adapter,
    normalize,
)

__all__ = [
    "available_symbols",
    "build_subscription",
    "default_symbol",
    "encode_subscription",
    "endpoint",
    "get_adapter",
    "normalize",
]
