from src.core.simulation.simulator import estimate_time_to_fill, inactive_result, simulate

__all__ = ["estimate_time_to_fill", "inactive_result", "simulate"]
