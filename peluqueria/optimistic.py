"""
Optimistic updates of a resource list.

An :class:`OptimisticList` keeps the last list confirmed by the API. While a
mutation is in flight its effect is visible in :attr:`OptimisticList.items`;
once the mutation returns the change is committed to the confirmed list. If
the mutation raises, the change is dropped, leaving the last-known-good list,
and the exception propagates to the caller.
"""

from contextlib import contextmanager
from typing import Callable, Generic, Iterable, Iterator, List, TypeVar

import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')
Reducer = Callable[[List[T]], List[T]]


class OptimisticList(Generic[T]):
    """A confirmed list plus the optimistic changes still in flight."""

    def __init__(self, items: Iterable[T],
                 key: Callable[[T], str] = lambda item: item.id) -> None:
        self._confirmed: List[T] = list(items)
        self._pending: List[Reducer] = []
        self._key = key

    @property
    def confirmed(self) -> List[T]:
        return list(self._confirmed)

    @property
    def items(self) -> List[T]:
        state = list(self._confirmed)
        for reducer in self._pending:
            state = reducer(state)
        return state

    @contextmanager
    def _optimistic(self, reducer: Reducer) -> Iterator[None]:
        self._pending.append(reducer)
        try:
            yield
        except Exception as e:
            logger.info('Rolling back optimistic change: %s', e)
            raise
        finally:
            self._pending.remove(reducer)

    def _replacing(self, item: T) -> Reducer:
        key = self._key(item)
        return lambda state: [item if self._key(i) == key else i
                              for i in state]

    def _removing(self, key: str) -> Reducer:
        return lambda state: [i for i in state if self._key(i) != key]

    def add(self, item: T, mutation: Callable[[], T]) -> T:
        """Show ``item`` while ``mutation`` runs; keep what it returns."""
        with self._optimistic(lambda state: state + [item]):
            created = mutation()
        self._confirmed.append(created)
        return created

    def replace(self, item: T, mutation: Callable[[], object]) -> T:
        """Show ``item`` in place of its namesake while ``mutation`` runs."""
        reducer = self._replacing(item)
        with self._optimistic(reducer):
            mutation()
        self._confirmed = reducer(self._confirmed)
        return item

    def remove(self, key: str, mutation: Callable[[], object]) -> None:
        """Hide the item with ``key`` while ``mutation`` runs."""
        reducer = self._removing(key)
        with self._optimistic(reducer):
            mutation()
        self._confirmed = reducer(self._confirmed)

    def filter(self, predicate: Callable[[T], bool]) -> List[T]:
        return [item for item in self.items if predicate(item)]
