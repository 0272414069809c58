from dataclasses import dataclass
from typing import Optional


@dataclass
class ConversionStats:
    """Counters for one conversion run."""

    rows_read: int = 0
    rows_written: int = 0
    rows_skipped: int = 0
    output_path: Optional[str] = None
