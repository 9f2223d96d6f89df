"""Tests for :class:`peluqueria.optimistic.OptimisticList`."""

from unittest import TestCase
from typing import NamedTuple

from ..optimistic import OptimisticList


class Item(NamedTuple):
    id: str
    nombre: str


class TestOptimisticList(TestCase):
    """Changes show while in flight, and roll back on failure."""

    def setUp(self):
        self.items = OptimisticList([Item('1', 'Corte'), Item('2', 'Barba')])

    def test_add_shows_while_in_flight(self):
        """The temporary item is visible during the mutation."""
        seen = []

        def mutation():
            seen.extend(self.items.items)
            return Item('3', 'Tinte')

        created = self.items.add(Item('tmp', 'Tinte'), mutation)
        self.assertEqual(created.id, '3')
        self.assertEqual([i.id for i in seen], ['1', '2', 'tmp'])
        self.assertEqual([i.id for i in self.items.items], ['1', '2', '3'])

    def test_failure_rolls_back(self):
        """A failed mutation restores the last-known-good list."""
        def boom():
            raise IOError('refused')

        for change in (lambda: self.items.add(Item('tmp', 'x'), boom),
                       lambda: self.items.replace(Item('1', 'x'), boom),
                       lambda: self.items.remove('1', boom)):
            with self.assertRaises(IOError):
                change()
            self.assertEqual(self.items.items,
                             [Item('1', 'Corte'), Item('2', 'Barba')])

    def test_replace_and_remove_commit(self):
        """Successful changes reach the confirmed list."""
        self.items.replace(Item('1', 'Corte premium'), lambda: None)
        self.items.remove('2', lambda: None)
        self.assertEqual(self.items.confirmed, [Item('1', 'Corte premium')])

    def test_filter(self):
        self.assertEqual(self.items.filter(lambda i: i.nombre == 'Barba'),
                         [Item('2', 'Barba')])
