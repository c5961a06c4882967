from __future__ import annotations

from enum import Enum


class SourceType(str, Enum):
    LOCAL = "local"
    S3 = "s3"
