"""
Barn balancing for one color partition.

A partition (all animals and barns of one color) is balanced when

    min_capacity > total_unused  and  max(unused) - min(unused) <= 1

where unused(barn) = capacity - head count, summed over every barn of the color.
The first clause means no barn could be emptied into the spare room of the
others; the second keeps spare room spread evenly.

Placement and removal write their change and then call
redistribute_one_step() until the predicate holds. Each step either dissolves
the smallest barn (when the others can absorb its animals) and/or moves a
single animal from the fullest to the emptiest barn.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List

from farm_app.config.limits import DEFAULT_BARN_CAPACITY, MAX_BALANCE_ITERATIONS
from farm_app.models import Animal, Barn, Color
from farm_app.repositories.partition_store import PartitionStore

_LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class BalanceInvariantError(Exception):
    """A barn would overflow, an animal would lose its barn, or repair did not converge."""

    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(slots=True)
class AnimalNotFoundError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(slots=True)
class PartitionState:
    """Barns of one color with their head counts, read fresh from the store."""

    color: Color
    barns: List[Barn] = field(default_factory=list)
    occupancy: Dict[int, int] = field(default_factory=dict)  # barn id -> head count
    animal_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.barns or self.animal_count == 0

    def unused(self, barn: Barn) -> int:
        return barn.capacity - self.occupancy[barn.id]

    @property
    def total_unused(self) -> int:
        return sum(self.unused(b) for b in self.barns)

    @property
    def min_capacity(self) -> int:
        return min(b.capacity for b in self.barns)


class Balancer:
    """
    Places and removes animals and keeps each color's barns balanced.

    Holds no partition state between calls; everything is re-read from the
    store. Callers are expected to run each place()/remove() inside one
    unit of work with exclusive access to the color.
    """

    def __init__(
        self,
        store: PartitionStore,
        barn_capacity: int = DEFAULT_BARN_CAPACITY,
        max_iterations: int = MAX_BALANCE_ITERATIONS,
    ) -> None:
        self._store = store
        self._barn_capacity = barn_capacity
        self._max_iterations = max_iterations

    # ------------------------------------------------------------------
    # Placement / removal
    # ------------------------------------------------------------------

    def place(self, animal: Animal) -> Animal:
        """Put the animal in a barn of its color, building one if needed."""
        color = animal.favorite_color

        if not self._store.find_barns_by_color(color):
            barn = self._build_barn(color)
            animal.barn_id = barn.id
            return self._store.save_animal(animal)

        state = self._read_partition(color)
        target: Barn | None = None
        for barn in state.barns:
            count = state.occupancy[barn.id]
            if count >= barn.capacity:
                continue
            if target is None or count < state.occupancy[target.id]:
                target = barn
        if target is None:
            target = self._build_barn(color)

        animal.barn_id = target.id
        self._store.save_animal(animal)
        _LOG.debug("Placed animal %s in barn %s", animal.id, target.id)

        self._rebalance(color)

        # Redistribution may have moved the new animal as well
        placed = self._store.get_animal(animal.id)
        if placed is not None:
            animal.barn_id = placed.barn_id
        return animal

    def remove(self, animal: Animal) -> None:
        """Delete the animal, drop its barn if now empty, then repair the partition."""
        stored = self._store.get_animal(animal.id) if animal.id is not None else None
        if stored is None:
            raise AnimalNotFoundError(f"Animal with id {animal.id} not found.")
        color = stored.favorite_color
        barn_id = stored.barn_id

        self._store.delete_animal(stored)

        if barn_id is not None:
            barn = self._store.get_barn(barn_id)
            if barn is not None and not self._store.find_animals_by_barn(barn):
                self._store.delete_barn(barn)
                _LOG.info("Removed empty barn %s (%s)", barn.id, barn.name)

        self._rebalance(color)

    # ------------------------------------------------------------------
    # Balance predicate and redistribution
    # ------------------------------------------------------------------

    def is_balanced(self, color: Color) -> bool:
        state = self._read_partition(color)
        if state.is_empty:
            return True
        unused = [state.unused(b) for b in state.barns]
        return state.min_capacity > sum(unused) and max(unused) - min(unused) <= 1

    def redistribute_one_step(self, color: Color) -> bool:
        """
        Run one corrective step on the color's barns.

        If the spare room across all barns is at least the smallest barn's
        capacity, that barn is emptied into the others and deleted. Then one
        animal moves from the fullest remaining barn to the emptiest, when
        that narrows the gap.

        Not idempotent: callers loop on is_balanced(). Returns True if
        anything was written.
        """
        state = self._read_partition(color)
        if state.is_empty:
            return False

        barns = list(state.barns)
        occupancy = dict(state.occupancy)
        changed = False

        if state.total_unused >= state.min_capacity:
            doomed = min(barns, key=lambda b: b.capacity)
            barns = [b for b in barns if b.id != doomed.id]
            occupancy.pop(doomed.id)
            self._dissolve(doomed, barns, occupancy)
            changed = True

        if self._equalize(barns, occupancy):
            changed = True
        return changed

    def _dissolve(self, doomed: Barn, barns: List[Barn], occupancy: Dict[int, int]) -> None:
        homeless = deque(self._store.find_animals_by_barn(doomed))
        moved = len(homeless)

        for barn in barns:
            if not homeless:
                break
            spare = barn.capacity - occupancy[barn.id]
            while spare > 0 and homeless:
                animal = homeless.popleft()
                animal.barn_id = barn.id
                self._store.save_animal(animal)
                occupancy[barn.id] += 1
                spare -= 1

        if homeless:
            raise BalanceInvariantError(
                f"Cannot dissolve barn {doomed.id}: {len(homeless)} animal(s) left without room."
            )

        self._store.delete_barn(doomed)
        _LOG.info("Dissolved barn %s (%s), rehoused %d animal(s)", doomed.id, doomed.name, moved)

    def _equalize(self, barns: List[Barn], occupancy: Dict[int, int]) -> bool:
        if len(barns) < 2:
            return False

        emptiest = min(barns, key=lambda b: occupancy[b.id])
        fullest = max((b for b in barns if b.id != emptiest.id), key=lambda b: occupancy[b.id])

        # A move across a gap of one only swaps which barn is fuller
        if occupancy[fullest.id] - occupancy[emptiest.id] < 2:
            return False
        if occupancy[emptiest.id] >= emptiest.capacity:
            return False

        animal = self._store.find_first_animal_by_barn(fullest)
        if animal is None:
            raise BalanceInvariantError(f"Barn {fullest.id} reported occupied but has no animals.")
        animal.barn_id = emptiest.id
        self._store.save_animal(animal)
        occupancy[fullest.id] -= 1
        occupancy[emptiest.id] += 1
        _LOG.debug("Moved animal %s from barn %s to barn %s", animal.id, fullest.id, emptiest.id)
        return True

    def _rebalance(self, color: Color) -> None:
        steps = 0
        while not self.is_balanced(color):
            if steps >= self._max_iterations:
                raise BalanceInvariantError(
                    f"{color.name} barns still unbalanced after {steps} redistribution steps."
                )
            if not self.redistribute_one_step(color):
                _LOG.warning("%s barns unbalanced but no redistribution step applies", color.name)
                return
            steps += 1
        if steps:
            _LOG.debug("Rebalanced %s barns in %d step(s)", color.name, steps)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_barn(self, color: Color) -> Barn:
        barn = self._store.save_barn(Barn.for_color(color, self._barn_capacity))
        _LOG.info("Built barn %s (%s, capacity %d)", barn.id, barn.name, barn.capacity)
        return barn

    def _read_partition(self, color: Color) -> PartitionState:
        barns = self._store.find_barns_by_color(color)
        animals = self._store.find_animals_by_color(color)

        occupancy: Dict[int, int] = {b.id: 0 for b in barns}
        for animal in animals:
            if animal.barn_id not in occupancy:
                raise BalanceInvariantError(
                    f"Animal {animal.id} references barn {animal.barn_id}, "
                    f"which is not a {color.name} barn."
                )
            occupancy[animal.barn_id] += 1

        for barn in barns:
            if occupancy[barn.id] > barn.capacity:
                raise BalanceInvariantError(
                    f"Barn {barn.id} holds {occupancy[barn.id]} animals, capacity {barn.capacity}."
                )

        return PartitionState(color=color, barns=barns, occupancy=occupancy, animal_count=len(animals))
