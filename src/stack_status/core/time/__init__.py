from stack_status.core.time.abc import Time
from stack_status.core.time.real import RealTime

__all__ = ["RealTime", "Time"]
