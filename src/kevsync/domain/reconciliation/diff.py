"""Desired-versus-current set difference.

One primitive serves every collection the reconciler manages; callers only pick
the comparison key (tag name, project uuid, condition value). Remote-assigned
identifiers never take part in the comparison, so a desired condition without a
uuid still matches its remote counterpart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable


@dataclass(frozen=True, slots=True)
class SetDiff[T]:
    """Elements to remove from and add to the current collection."""

    to_remove: tuple[T, ...] = ()
    to_add: tuple[T, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.to_remove and not self.to_add


def unique_by_key[T](items: Iterable[T], key: Callable[[T], Hashable]) -> dict[Hashable, T]:
    """Collapse ``items`` by ``key``; the first occurrence wins and order is kept."""

    unique: dict[Hashable, T] = {}
    for item in items:
        unique.setdefault(key(item), item)
    return unique


def diff_by_key[T](
    current: Iterable[T],
    desired: Iterable[T],
    *,
    key: Callable[[T], Hashable],
) -> SetDiff[T]:
    current_by_key = unique_by_key(current, key)
    desired_by_key = unique_by_key(desired, key)
    to_remove = tuple(
        item for item_key, item in current_by_key.items() if item_key not in desired_by_key
    )
    to_add = tuple(
        item for item_key, item in desired_by_key.items() if item_key not in current_by_key
    )
    return SetDiff(to_remove=to_remove, to_add=to_add)


def _identity[K](value: K) -> K:
    return value


def diff[K: Hashable](current: Iterable[K], desired: Iterable[K]) -> SetDiff[K]:
    """``diff_by_key`` for collections whose elements are their own key."""

    return diff_by_key(current, desired, key=_identity)


__all__ = ["SetDiff", "diff", "diff_by_key", "unique_by_key"]
