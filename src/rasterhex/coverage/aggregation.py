"""Aggregation policies: how samples falling into the same cell are combined.

A policy is a commutative monoid over accumulated values plus two
adapters: ``lift`` turns a raw sample into an accumulated value and
``finalize`` turns the accumulated value into the reported result. All
built-in callables are module-level functions so policies can be pickled
for process pools. MIN, MAX and UNIQUE treat NaN as absorbing, so a
cell holding a NaN sample reports NaN whatever the sample order.
"""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict

import numpy as np

from rasterhex.errors import AggregationConflict, InvalidInput

__all__ = [
    'AggregationPolicy',
    'SUM', 'COUNT', 'MIN', 'MAX', 'MEAN', 'COLLECT', 'MAJORITY', 'UNIQUE',
    'POLICIES',
    'get_policy',
]


def _identity(value):
    return value


def _scalar(sample):
    """Convert numpy scalars to Python scalars (no fixed-width overflow)."""
    if isinstance(sample, np.generic):
        return sample.item()
    return sample


def _add(a, b):
    return a + b


def _one(sample):
    return 1


def _pair(sample):
    return (_scalar(sample), 1)


def _add_pairs(a, b):
    return (a[0] + b[0], a[1] + b[1])


def _pair_mean(acc):
    return acc[0] / acc[1]


def _counter(sample):
    return Counter([_scalar(sample)])


def _most_common(counts: Counter):
    # highest count first, smallest value among equal counts
    top = max(counts.values())
    return min(value for value, n in counts.items() if n == top)


def _isnan(value) -> bool:
    return isinstance(value, (float, np.floating)) and math.isnan(value)


def _min(a, b):
    # NaN propagates from either side
    if _isnan(a):
        return a
    if _isnan(b):
        return b
    return min(a, b)


def _max(a, b):
    if _isnan(a):
        return a
    if _isnan(b):
        return b
    return max(a, b)


def _same(a, b):
    if _isnan(a) and _isnan(b):
        return a
    if a != b:
        raise AggregationConflict(f"Conflicting values {a!r} and {b!r} in one cell")
    return a



@dataclass(frozen=True)
class AggregationPolicy:
    """Combine rule for samples sharing a cell.

    Attributes
    ----------
    name : str
        Registry name.
    combine : callable
        ``(acc, acc) -> acc``; must be associative and commutative for
        results to be independent of chunking and scheduling.
    lift : callable
        ``sample -> acc`` applied to each sample before combining.
    finalize : callable
        ``acc -> result`` applied once to each cell of the final coverage.
    """

    name: str
    combine: Callable[[Any, Any], Any]
    lift: Callable[[Any], Any] = _scalar
    finalize: Callable[[Any], Any] = _identity


SUM = AggregationPolicy("sum", _add)
COUNT = AggregationPolicy("count", _add, lift=_one)
MIN = AggregationPolicy("min", _min)
MAX = AggregationPolicy("max", _max)
MEAN = AggregationPolicy("mean", _add_pairs, lift=_pair, finalize=_pair_mean)
COLLECT = AggregationPolicy("collect", _add, lift=_counter)
MAJORITY = AggregationPolicy("majority", _add, lift=_counter, finalize=_most_common)
UNIQUE = AggregationPolicy("unique", _same)

POLICIES: Dict[str, AggregationPolicy] = {
    policy.name: policy
    for policy in (SUM, COUNT, MIN, MAX, MEAN, COLLECT, MAJORITY, UNIQUE)
}


def get_policy(name) -> AggregationPolicy:
    """Look up a built-in policy by name (policies are passed through)."""
    if isinstance(name, AggregationPolicy):
        return name
    try:
        return POLICIES[str(name).lower()]
    except KeyError:
        raise InvalidInput(
            f"Unknown aggregation policy {name!r}, expected one of {sorted(POLICIES)}"
        ) from None
