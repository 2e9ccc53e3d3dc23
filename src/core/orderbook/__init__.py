from src.core.orderbook.aggregator import aggregate
from src.core.orderbook.imbalance import compute_imbalance

__all__ = ["aggregate", "compute_imbalance"]
