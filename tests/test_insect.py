"""Tests for gardensim.entities.insect — movement, feeding and predation."""

import pytest
from numpy.random import Generator

from gardensim.entities.insect import Insect
from gardensim.entities.plant import Plant
from gardensim.entities.species import insect_species
from gardensim.events.sink import Category, MemoryEventSink
from gardensim.world.geometry import Position


def _insect(name: str, row: int = 2, col: int = 2, ident: str = "INSECT-1") -> Insect:
    return Insect(
        id=ident,
        species=insect_species(name),
        position=Position(row, col),
        sink=MemoryEventSink(),
    )


class TestLifecycle:
    """Tests for aging and death."""

    def test_dies_exactly_at_lifespan(self, rng: Generator) -> None:
        aphid = _insect("Aphid")
        for _ in range(199):
            aphid.update([], 10, 10, rng)
        assert aphid.alive
        assert aphid.age == 199

        aphid.update([], 10, 10, rng)
        assert not aphid.alive
        assert aphid.age == 200

    def test_dead_insect_is_frozen(self, rng: Generator) -> None:
        aphid = _insect("Aphid")
        for _ in range(200):
            aphid.update([], 10, 10, rng)
        position = aphid.position
        aphid.update([], 10, 10, rng)
        assert aphid.age == 200
        assert aphid.position == position

    def test_age_stays_below_lifespan_while_alive(self, rng: Generator) -> None:
        caterpillar = _insect("Caterpillar")
        while caterpillar.alive:
            assert caterpillar.age < caterpillar.species.lifespan
            caterpillar.update([], 10, 10, rng)

    def test_kill_is_idempotent(self) -> None:
        bee = _insect("Bee")
        bee.kill("test")
        count = len(bee.sink)
        bee.kill("again")
        assert not bee.alive
        assert len(bee.sink) == count


class TestMovement:
    """Tests for the random walk."""

    def test_stays_in_bounds(self, rng: Generator) -> None:
        bee = _insect("Bee", row=0, col=0)
        for _ in range(299):
            bee.update([], 5, 5, rng)
            assert bee.position.in_bounds(5, 5)

    def test_records_previous_position(self, rng: Generator) -> None:
        bee = _insect("Bee")
        start = bee.position
        bee.update([], 10, 10, rng)
        assert bee.previous_position == start

    def test_moves_at_most_one_range_per_axis(self, rng: Generator) -> None:
        aphid = _insect("Aphid", row=5, col=5)
        for _ in range(100):
            before = aphid.position
            aphid.update([], 10, 10, rng)
            assert abs(aphid.position.row - before.row) <= 1
            assert abs(aphid.position.col - before.col) <= 1

    def test_slow_species_still_drift(self, rng: Generator) -> None:
        caterpillar = _insect("Caterpillar", row=5, col=5)
        seen = set()
        for _ in range(100):
            caterpillar.update([], 10, 10, rng)
            seen.add(caterpillar.position)
        assert len(seen) > 1


class TestInteraction:
    """Tests for pests feeding and pollinators visiting."""

    def test_pest_damages_nearby_plant(self, rng: Generator, tomato) -> None:
        plant = Plant(id="PLANT-1", species=tomato, position=Position(2, 2))
        aphid = _insect("Aphid")
        aphid.update([plant], 10, 10, rng)
        # Aphid damage 0.8 reduced by Tomato resistance 0.3
        assert plant.health == pytest.approx(100.0 - 0.56)

    def test_pest_ignores_distant_plant(self, rng: Generator, tomato) -> None:
        plant = Plant(id="PLANT-1", species=tomato, position=Position(9, 9))
        aphid = _insect("Aphid", row=0, col=0)
        aphid.update([plant], 10, 10, rng)
        assert plant.health == 100.0

    def test_pollinator_does_no_damage(self, rng: Generator, tomato) -> None:
        plant = Plant(id="PLANT-1", species=tomato, position=Position(2, 2))
        bee = _insect("Bee")
        for _ in range(60):
            bee.update([plant], 10, 10, rng)
        assert plant.health == 100.0


class TestPredation:
    """Tests for beneficial insects hunting pests."""

    def test_certain_kill(self, rng: Generator) -> None:
        ladybug = _insect("Ladybug", ident="INSECT-1")
        aphid = _insect("Aphid", col=3, ident="INSECT-2")
        eaten = ladybug.predate([ladybug, aphid], 2.0, 1.0, rng)
        assert eaten is aphid
        assert not aphid.alive

    def test_impossible_kill(self, rng: Generator) -> None:
        ladybug = _insect("Ladybug", ident="INSECT-1")
        aphid = _insect("Aphid", col=3, ident="INSECT-2")
        assert ladybug.predate([ladybug, aphid], 2.0, 0.0, rng) is None
        assert aphid.alive

    def test_at_most_one_kill_per_tick(self, rng: Generator) -> None:
        ladybug = _insect("Ladybug", ident="INSECT-1")
        pests = [_insect("Aphid", col=3, ident=f"INSECT-{i}") for i in range(2, 6)]
        ladybug.predate([ladybug, *pests], 2.0, 1.0, rng)
        assert sum(1 for p in pests if not p.alive) == 1

    def test_out_of_range_pest_survives(self, rng: Generator) -> None:
        ladybug = _insect("Ladybug", ident="INSECT-1")
        aphid = _insect("Aphid", row=8, col=8, ident="INSECT-2")
        assert ladybug.predate([ladybug, aphid], 2.0, 1.0, rng) is None

    def test_only_beneficials_hunt(self, rng: Generator) -> None:
        bee = _insect("Bee", ident="INSECT-1")
        aphid = _insect("Aphid", col=3, ident="INSECT-2")
        assert bee.predate([bee, aphid], 2.0, 1.0, rng) is None
        assert aphid.alive

    def test_beneficials_are_not_prey(self, rng: Generator) -> None:
        ladybug = _insect("Ladybug", ident="INSECT-1")
        bee = _insect("Bee", col=3, ident="INSECT-2")
        assert ladybug.predate([ladybug, bee], 2.0, 1.0, rng) is None

    def test_kill_reports_insect_event(self, rng: Generator) -> None:
        ladybug = _insect("Ladybug", ident="INSECT-1")
        aphid = _insect("Aphid", col=3, ident="INSECT-2")
        ladybug.predate([ladybug, aphid], 2.0, 1.0, rng)
        messages = aphid.sink.messages(Category.INSECT)
        assert any("Eaten by Ladybug" in m for m in messages)
