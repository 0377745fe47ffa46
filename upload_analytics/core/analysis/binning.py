# core/analysis/binning.py
"""
Equal-width partitioning of numeric sequences.

Histogram bins keep empty intervals; pie ranges drop them. Downstream
consumers rely on that asymmetry.
"""

import bisect
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from upload_analytics.core.exceptions import EmptyColumnError

Number = Union[int, float]

DEFAULT_HISTOGRAM_BINS = 10
DEFAULT_PIE_RANGES = 5


@dataclass(frozen=True)
class Bin:
    lower_bound: float
    upper_bound: float
    count: int

    @property
    def label(self) -> str:
        return format_interval(self.lower_bound, self.upper_bound)

    def to_dict(self) -> Dict[str, Union[float, int]]:
        return {"min": self.lower_bound, "max": self.upper_bound, "count": self.count}


@dataclass(frozen=True)
class ValueRange:
    label: str
    lower_bound: float
    upper_bound: float
    count: int

    def to_dict(self) -> Dict[str, Union[str, float, int]]:
        return {"label": self.label, "min": self.lower_bound, "max": self.upper_bound, "count": self.count}


def format_interval(lower: float, upper: float) -> str:
    return f"{lower:.1f}-{upper:.1f}"


def _partition(values: Sequence[Number], count: int,
               column: Optional[str] = None) -> List[Bin]:
    if count < 1:
        raise ValueError(f"Bin count must be at least 1, got {count}")

    if not values:
        raise EmptyColumnError(column or "values", "Cannot partition an empty sequence")

    low = min(values)
    high = max(values)
    width = (high - low) / count

    lowers = [low + i * width for i in range(count)]
    uppers = lowers[1:] + [high]
    counts = [0] * count

    if width == 0:
        # Constant input: every value lands in the first interval
        counts[0] = len(values)
    else:
        for value in values:
            # [lower, upper) for every bin but the last, which is [lower, high]
            index = bisect.bisect_right(lowers, value) - 1
            counts[min(max(index, 0), count - 1)] += 1

    return [
        Bin(lower_bound=float(lowers[i]), upper_bound=float(uppers[i]), count=counts[i])
        for i in range(count)
    ]


def histogram_bins(values: Sequence[Number], bin_count: int = DEFAULT_HISTOGRAM_BINS,
                   column: Optional[str] = None) -> List[Bin]:
    """
    Fixed-count equal-width histogram over [min, max], empty bins kept.

    Counts always sum to len(values).
    """
    return _partition(values, bin_count, column)


def value_ranges(values: Sequence[Number], range_count: int = DEFAULT_PIE_RANGES,
                 column: Optional[str] = None) -> List[ValueRange]:
    """
    Coarse equal-width ranges for pie charts; empty ranges are omitted
    """
    return [
        ValueRange(
            label=bin_.label,
            lower_bound=bin_.lower_bound,
            upper_bound=bin_.upper_bound,
            count=bin_.count,
        )
        for bin_ in _partition(values, range_count, column)
        if bin_.count > 0
    ]
