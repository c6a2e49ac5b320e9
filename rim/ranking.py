"""
Multi-key ranking of InterfaceRecords.

Records are ordered by an ordered list of sort keys. For each pair the keys are
tried in turn and the first one that tells the two records apart decides; the
last key decides unconditionally. Rates sort in descending order unless the key
is prefixed with '+'.

Records of failed hosts always sort before every successful record and keep
their input order among themselves.

Usage:
    keys = validate_sort_keys(["rx-dps", "rx-Kbps"])
    ranked = rank(records, keys)
"""

import functools
from dataclasses import dataclass
from typing import Callable, List, Sequence, Union

from rim.config import ASCENDING_PREFIX, COUNTER_KEYS, SORT_KEY_ALIASES, SORT_KEYS
from rim.errors import InvalidSortKeyError
from rim.sampler import InterfaceRecord

LessFunc = Callable[[InterfaceRecord, InterfaceRecord], bool]


@dataclass(frozen=True)
class SortKey:
    """A resolved sort key.

    Attributes:
        name: Key as supplied by the user.
        rate_key: Key of the stored rate it resolves to.
        descending: Higher rates first when True.
    """
    name: str
    rate_key: str
    descending: bool = True


def resolve_sort_key(key: Union[str, SortKey]) -> SortKey:
    """
    Resolve a user supplied key name, applying aliases.

    Raises:
        InvalidSortKeyError: If the key does not name a known rate.
    """
    if isinstance(key, SortKey):
        return key
    name = key.strip()
    descending = True
    if name.startswith(ASCENDING_PREFIX):
        name = name[len(ASCENDING_PREFIX):]
        descending = False
    rate_key = SORT_KEY_ALIASES.get(name, name)
    if rate_key not in COUNTER_KEYS:
        raise InvalidSortKeyError(key, SORT_KEYS)
    return SortKey(name=name, rate_key=rate_key, descending=descending)


def validate_sort_keys(keys: Sequence[Union[str, SortKey]]) -> List[SortKey]:
    """
    Resolve every key before any host is contacted.

    Raises:
        ValueError: If no key is given.
        InvalidSortKeyError: On the first key that cannot be resolved.
    """
    if not keys:
        raise ValueError("At least one sort key is required")
    return [resolve_sort_key(k) for k in keys]


def by_key(key: Union[str, SortKey]) -> LessFunc:
    """Return a less function comparing records on one rate."""
    sort_key = resolve_sort_key(key)
    rate_key = sort_key.rate_key

    def less(r1: InterfaceRecord, r2: InterfaceRecord) -> bool:
        if r1.failed or r2.failed:
            return r1.failed and not r2.failed
        v1 = r1.rates.get(rate_key, 0)
        v2 = r2.rates.get(rate_key, 0)
        if sort_key.descending:
            return v1 > v2
        return v1 < v2
    return less


class MultiKeySorter:
    """Sorts records with a cascade of less functions."""

    def __init__(self, *less_functions: LessFunc):
        if not less_functions:
            raise ValueError("MultiKeySorter needs at least one less function")
        self.less_functions = less_functions

    def _compare(self, p: InterfaceRecord, q: InterfaceRecord) -> int:
        for less in self.less_functions[:-1]:
            if less(p, q):
                return -1
            if less(q, p):
                return 1
            # p == q on this key, try the next one
        last = self.less_functions[-1]
        if last(p, q):
            return -1
        if last(q, p):
            return 1
        return 0

    def sort(self, records: List[InterfaceRecord]) -> None:
        """Sort records in place. The sort is stable."""
        records.sort(key=functools.cmp_to_key(self._compare))


def order_by(*less_functions: LessFunc) -> MultiKeySorter:
    return MultiKeySorter(*less_functions)


def rank(records: Sequence[InterfaceRecord], keys: Sequence[Union[str, SortKey]]) -> List[InterfaceRecord]:
    """Return a new list of records ordered by keys."""
    sort_keys = validate_sort_keys(keys)
    ranked = list(records)
    order_by(*[by_key(k) for k in sort_keys]).sort(ranked)
    return ranked


__all__ = [
    "SortKey",
    "resolve_sort_key",
    "validate_sort_keys",
    "by_key",
    "MultiKeySorter",
    "order_by",
    "rank",
]
