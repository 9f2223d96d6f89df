"""A read-only ``{identity, loading}`` view over the session store."""

from typing import Callable, List, Optional

from ..domain import Identity
from ..store import SessionState, SessionStore


class AuthView(object):
    """
    Derives ``identity`` and ``loading`` from a :class:`.SessionStore`.

    ``loading`` is true until the store is ready. Subscribers are called only
    when the derived pair actually changes.
    """

    def __init__(self, store: SessionStore) -> None:
        self._listeners: List[Callable[['AuthView'], None]] = []
        self._identity, self._loading = self._derive(store.state)
        self._unsubscribe = store.subscribe(self._on_store_change)

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def loading(self) -> bool:
        return self._loading

    def __bool__(self) -> bool:
        """True when an identity is known, whether or not loading is done."""
        return self._identity is not None

    def subscribe(self, listener: Callable[['AuthView'], None]) -> None:
        self._listeners.append(listener)

    def close(self) -> None:
        """Stop following the store."""
        self._unsubscribe()

    @staticmethod
    def _derive(state: SessionState) -> tuple:
        return state.identity, not state.ready

    def _on_store_change(self, state: SessionState) -> None:
        derived = self._derive(state)
        if derived == (self._identity, self._loading):
            return
        self._identity, self._loading = derived
        for listener in list(self._listeners):
            listener(self)
