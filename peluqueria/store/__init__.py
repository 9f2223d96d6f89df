"""
The session store: who is currently authenticated.

A :class:`SessionStore` holds the current :class:`.Identity` and a ``ready``
flag. It is built once per request by :class:`peluqueria.auth.Auth`, and
every component that gates or personalizes on the identity reads it from
there.

Rehydration
-----------
:meth:`SessionStore.rehydrate` reads the persisted envelope immediately but
applies it on the next tick. Subscribers wired up in the same pass as the
store therefore see the ``ready`` transition. Until then the store is
indeterminate: an absent identity does not mean the visitor is logged out.
An identity set, or a clear, before that tick wins over the envelope.

Persistence
-----------
:meth:`SessionStore.set_identity` updates memory (and subscribers) at once,
and writes the envelope on the next tick. :meth:`SessionStore.clear` removes
the envelope immediately and cancels any write still queued.
"""

from typing import Any, Callable, Dict, List, NamedTuple, Optional, Union

from pydantic import ValidationError

from ..domain import Identity
from .persistence import EncryptedStorage
from .ticks import NextTick

import logging

logger = logging.getLogger(__name__)

STORAGE_KEY = 'auth-storage'
ENVELOPE_VERSION = 0


class SessionState(NamedTuple):
    """A snapshot of the store."""

    identity: Optional[Identity]
    ready: bool


Listener = Callable[[SessionState], None]
Defer = Callable[..., None]


class SessionStore(object):
    """Holds the current identity and persists it through the storage."""

    def __init__(self, storage: EncryptedStorage, defer: Defer,
                 key: str = STORAGE_KEY,
                 version: int = ENVELOPE_VERSION) -> None:
        """
        Parameters
        ----------
        storage : :class:`.EncryptedStorage`
        defer : callable
            Schedules ``defer(callback, *args)`` after the current pass, e.g.
            :meth:`.NextTick.call_soon`.
        key : str
            Storage key of the envelope.
        version : int
            Envelopes written with another version are discarded.

        """
        self._storage = storage
        self._defer = defer
        self._key = key
        self._version = version
        self._identity: Optional[Identity] = None
        self._ready = False
        self._hydrating = False
        self._generation = 0
        self._listeners: List[Listener] = []

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def state(self) -> SessionState:
        return SessionState(identity=self._identity, ready=self._ready)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the new state after every change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def set_identity(self,
                     identity: Optional[Union[Identity, Dict[str, Any]]]) \
            -> None:
        """Replace the identity; the envelope is written on the next tick."""
        if isinstance(identity, dict):
            identity = Identity.model_validate(identity)
        self._identity = identity
        self._generation += 1
        self._notify()
        self._defer(self._persist, self._generation)

    def clear(self) -> None:
        """Forget the identity and remove the envelope right away."""
        self._identity = None
        self._generation += 1
        self._storage.remove(self._key)
        logger.debug('Session cleared')
        self._notify()

    def rehydrate(self) -> None:
        """Read the envelope, and apply it on the next tick."""
        if self._ready or self._hydrating:
            return
        self._hydrating = True
        identity = self._identity_from(self._storage.read(self._key))
        self._defer(self._finish_rehydration, identity, self._generation)

    def _finish_rehydration(self, identity: Optional[Identity],
                            generation: int) -> None:
        if self._ready:
            return
        # A set_identity() or clear() since rehydrate() is newer than storage.
        if identity is not None and generation == self._generation:
            self._identity = identity
        self._ready = True
        self._hydrating = False
        logger.debug('Session rehydrated, identity present: %s',
                     identity is not None)
        self._notify()

    def _persist(self, generation: int) -> None:
        if generation != self._generation:
            return      # Superseded by a later change, or cleared.
        self._storage.write(self._key, self._envelope())

    def _envelope(self) -> Dict[str, Any]:
        identity = None
        if self._identity is not None:
            identity = self._identity.model_dump(mode='json')
        return {
            'state': {'identity': identity, 'ready': self._ready},
            'version': self._version
        }

    def _identity_from(self, envelope: Any) -> Optional[Identity]:
        if not isinstance(envelope, dict):
            return None
        if envelope.get('version', ENVELOPE_VERSION) != self._version:
            logger.info('Discarding envelope with version %s',
                        envelope.get('version'))
            return None
        state = envelope.get('state')
        if not isinstance(state, dict) or not state.get('identity'):
            return None
        try:
            return Identity.model_validate(state['identity'])
        except ValidationError as e:
            logger.error('Discarding malformed identity: %s', e)
            return None

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            listener(state)


__all__ = ('SessionStore', 'SessionState', 'EncryptedStorage', 'NextTick',
           'STORAGE_KEY')
