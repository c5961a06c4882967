from .source import ByteSource
from .writer import UserWriter

__all__ = [
    "ByteSource",
    "UserWriter",
]
