from .random_pacer import RandomPacer
from .structured_logger import StructuredLogger
from .system_clock import SystemClock
from .uuid_id_generator import UuidIdGenerator

__all__ = ["RandomPacer", "StructuredLogger", "SystemClock", "UuidIdGenerator"]
