"""Tests for :class:`peluqueria.store.SessionStore`."""

from unittest import TestCase, mock

from ...domain import Identity
from .. import ENVELOPE_VERSION, STORAGE_KEY, SessionStore
from ..persistence import EncryptedStorage, MemoryStorage
from ..ticks import NextTick

SECRET = 'foosecret'


def make_store(medium=None, version=ENVELOPE_VERSION):
    """A store on top of ``medium``, with its own next-tick queue."""
    medium = medium if medium is not None else MemoryStorage()
    ticks = NextTick()
    store = SessionStore(EncryptedStorage(medium, SECRET), ticks.call_soon,
                         version=version)
    return store, ticks, medium


def identity(**extra):
    data = {'id': 'u1', 'email': 'a@b.com', 'token': 'T',
            'peluqueria': 'Acme', 'peluqueria_id': '7'}
    data.update(extra)
    return Identity.model_validate(data)


class TestRehydration(TestCase):
    """The store becomes ready once, on the tick after :meth:`rehydrate`."""

    def test_not_ready_until_tick(self):
        """Readiness is never reported in the same pass."""
        store, ticks, _ = make_store()
        self.assertFalse(store.ready)
        store.rehydrate()
        self.assertFalse(store.ready, 'Not ready before the tick')
        ticks.run_pending()
        self.assertTrue(store.ready)
        self.assertIsNone(store.identity)

    def test_subscriber_sees_transition(self):
        """A listener subscribed after rehydrate() sees ready go true."""
        store, ticks, _ = make_store()
        store.rehydrate()
        listener = mock.MagicMock()
        store.subscribe(listener)
        ticks.run_pending()
        listener.assert_called_once()
        self.assertTrue(listener.call_args[0][0].ready)

    def test_restores_persisted_identity(self):
        """An identity written in one pass is restored in the next."""
        store, ticks, medium = make_store()
        store.rehydrate()
        ticks.run_pending()
        store.set_identity(identity())
        ticks.run_pending()

        restarted, ticks, _ = make_store(medium)
        restarted.rehydrate()
        self.assertIsNone(restarted.identity)
        ticks.run_pending()
        self.assertTrue(restarted.ready)
        self.assertEqual(restarted.identity.model_dump(),
                         identity().model_dump())

    def test_ready_is_monotonic(self):
        """Once ready, nothing makes the store not ready again."""
        store, ticks, _ = make_store()
        seen = []
        store.subscribe(lambda state: seen.append(state.ready))
        store.rehydrate()
        ticks.run_pending()
        store.set_identity(identity())
        store.clear()
        store.rehydrate()
        ticks.run_pending()
        store.set_identity({'id': 'u2'})
        ticks.run_pending()
        self.assertTrue(store.ready)
        self.assertEqual(seen[0], True)
        self.assertTrue(all(seen), 'Never goes back to not ready')

    def test_rehydrate_twice_is_a_noop(self):
        """A second rehydrate() schedules nothing."""
        store, ticks, _ = make_store()
        store.rehydrate()
        store.rehydrate()
        self.assertEqual(len(ticks), 1)
        ticks.run_pending()
        store.rehydrate()
        self.assertEqual(len(ticks), 0)

    def test_identity_set_before_rehydration_wins(self):
        """A fresh login is not overwritten by an older persisted envelope."""
        medium = MemoryStorage()
        store, ticks, _ = make_store(medium)
        store.set_identity(identity(id='old'))
        ticks.run_pending()

        store, ticks, _ = make_store(medium)
        store.rehydrate()
        store.set_identity(identity(id='new'))
        ticks.run_pending()
        self.assertEqual(store.identity.id, 'new')

    def test_corrupted_envelope(self):
        """Garbage in storage rehydrates as logged out, without raising."""
        medium = MemoryStorage({STORAGE_KEY: 'garbage'})
        store, ticks, _ = make_store(medium)
        store.rehydrate()
        ticks.run_pending()
        self.assertTrue(store.ready)
        self.assertIsNone(store.identity)

    def test_envelope_from_other_version(self):
        """Envelopes of another version are discarded."""
        medium = MemoryStorage()
        store, ticks, _ = make_store(medium, version=1)
        store.set_identity(identity())
        ticks.run_pending()

        store, ticks, _ = make_store(medium, version=0)
        store.rehydrate()
        ticks.run_pending()
        self.assertTrue(store.ready)
        self.assertIsNone(store.identity)

    def test_malformed_identity(self):
        """An envelope with an unusable identity is treated as absent."""
        medium = MemoryStorage()
        EncryptedStorage(medium, SECRET).write(STORAGE_KEY, {
            'state': {'identity': {'created_at': 'not a date'},
                      'ready': True},
            'version': ENVELOPE_VERSION
        })
        store, ticks, _ = make_store(medium)
        store.rehydrate()
        ticks.run_pending()
        self.assertTrue(store.ready)
        self.assertIsNone(store.identity)


class TestPersistence(TestCase):
    """Writes are deferred; clear() is immediate."""

    def test_set_identity_is_visible_at_once(self):
        """Memory and subscribers see a new identity synchronously."""
        store, ticks, medium = make_store()
        listener = mock.MagicMock()
        store.subscribe(listener)
        store.set_identity({'id': 'u1', 'token': 'T'})
        self.assertEqual(store.identity.id, 'u1')
        listener.assert_called_once()
        self.assertEqual(medium.data, {}, 'Not persisted yet')
        ticks.run_pending()
        self.assertIn(STORAGE_KEY, medium.data)

    def test_envelope_shape(self):
        """The envelope carries the identity, readiness and a version."""
        store, ticks, medium = make_store()
        store.rehydrate()
        ticks.run_pending()
        store.set_identity(identity())
        ticks.run_pending()
        envelope = EncryptedStorage(medium, SECRET).read(STORAGE_KEY)
        self.assertEqual(envelope['version'], ENVELOPE_VERSION)
        self.assertTrue(envelope['state']['ready'])
        self.assertEqual(envelope['state']['identity']['token'], 'T')
        self.assertEqual(envelope['state']['identity']['peluqueria'], 'Acme')

    def test_clear_removes_envelope(self):
        """After clear() nothing is left to rehydrate."""
        store, ticks, medium = make_store()
        store.set_identity(identity())
        ticks.run_pending()
        store.clear()
        self.assertIsNone(store.identity)
        self.assertNotIn(STORAGE_KEY, medium.data)

    def test_clear_cancels_queued_write(self):
        """A write still queued when clear() runs never happens."""
        store, ticks, medium = make_store()
        store.set_identity(identity())
        store.clear()
        ticks.run_pending()
        self.assertNotIn(STORAGE_KEY, medium.data)

    def test_clear_survives_restart(self):
        """Logout then reload yields ready with no identity."""
        store, ticks, medium = make_store()
        store.rehydrate()
        ticks.run_pending()
        store.set_identity(identity())
        ticks.run_pending()
        store.clear()
        ticks.run_pending()

        reloaded, ticks, _ = make_store(medium)
        reloaded.rehydrate()
        ticks.run_pending()
        self.assertTrue(reloaded.ready)
        self.assertIsNone(reloaded.identity)

    def test_last_write_wins(self):
        """Only the latest identity of a pass is persisted."""
        store, ticks, medium = make_store()
        store.set_identity(identity(id='u1'))
        store.set_identity(identity(id='u2'))
        ticks.run_pending()
        envelope = EncryptedStorage(medium, SECRET).read(STORAGE_KEY)
        self.assertEqual(envelope['state']['identity']['id'], 'u2')

    def test_unsubscribe(self):
        """An unsubscribed listener is not called again."""
        store, _, _ = make_store()
        listener = mock.MagicMock()
        unsubscribe = store.subscribe(listener)
        unsubscribe()
        unsubscribe()
        store.set_identity(identity())
        listener.assert_not_called()


class TestNextTick(TestCase):
    """Tests for :class:`.NextTick`."""

    def test_runs_in_order_including_nested(self):
        """Callbacks run FIFO, and those added while draining run too."""
        ticks = NextTick()
        calls = []
        ticks.call_soon(calls.append, 1)
        ticks.call_soon(lambda: ticks.call_soon(calls.append, 3))
        ticks.call_soon(calls.append, 2)
        self.assertEqual(calls, [], 'Nothing runs inline')
        self.assertEqual(ticks.run_pending(), 4)
        self.assertEqual(calls, [1, 2, 3])
        self.assertEqual(ticks.run_pending(), 0)
