from collections import defaultdict
from typing import NamedTuple

import numpy as np

from .duration import ZERO, Duration

SORT_KEYS = ("name", "cumulative", "mean", "median", "count")


class FunctionStats(NamedTuple):
    name: str
    cumulative: Duration
    mean: float
    median: float
    count: int


def cumulative(durations):
    total = ZERO
    for duration in durations:
        total = total + duration
    return total


def median(durations):
    """
    Median in seconds. An even number of samples averages the two middle ones.
    """
    return float(np.median([duration.total_seconds() for duration in durations]))


class StatsAggregator:
    """
    Collect durations per function name and summarize them on demand.
    """

    def __init__(self):
        self.calls = defaultdict(list)

    def record(self, name: str, duration: Duration):
        self.calls[name].append(duration)

    def samples(self, name):
        return tuple(self.calls.get(name, ()))

    @property
    def total_samples(self):
        return sum(len(durations) for durations in self.calls.values())

    def __len__(self):
        return len(self.calls)

    def __contains__(self, name):
        return name in self.calls

    def summarize(self, name):
        durations = self.calls[name]
        total = cumulative(durations)
        return FunctionStats(
            name=name,
            cumulative=total,
            mean=total.total_seconds() / len(durations),
            median=median(durations),
            count=len(durations),
        )

    def report(self, sort="name"):
        """
        One FunctionStats row per function.

        Rows are ordered by name, or by the given metric with the largest
        first (ties broken by name).
        """
        if sort not in SORT_KEYS:
            raise ValueError(f"Unknown sort key {sort!r}, choose from {', '.join(SORT_KEYS)}")

        rows = [self.summarize(name) for name in sorted(self.calls)]
        if sort != "name":
            rows.sort(key=lambda row: getattr(row, sort), reverse=True)
        return rows
