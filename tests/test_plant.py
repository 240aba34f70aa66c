"""Tests for gardensim.entities.plant — health terms, growth and death."""

import pytest

from gardensim.entities.plant import DAY_CYCLE_TICKS, GrowthStage, Plant
from gardensim.entities.species import PlantSpecies, plant_species
from gardensim.events.sink import Category, Level, MemoryEventSink
from gardensim.world.geometry import Position

# Comfortable for both Tomato and Lettuce
_IDEAL = {"temperature": 68.0, "light": 60.0, "humidity": 50.0}


def _plant(
    species: PlantSpecies,
    sink: MemoryEventSink | None = None,
    **kw,
) -> Plant:
    return Plant(
        id="PLANT-1",
        species=species,
        position=Position(2, 2),
        sink=sink if sink is not None else MemoryEventSink(),
        **kw,
    )


class TestPlantHealth:
    """Tests for the per-tick health delta."""

    def test_dehydrated_plant_loses_health(self, tomato: PlantSpecies) -> None:
        """Water 5 in ideal conditions: -2.5 + 0.6 + 0.5 + 0.2 + 0.15."""
        plant = _plant(tomato, health=80.0, water_level=5.0)
        plant.update(**_IDEAL)
        assert plant.water_level == pytest.approx(5.0 - 1.2)
        assert plant.health == pytest.approx(80.0 - 1.05)

    def test_ideal_conditions_heal(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, health=50.0, water_level=55.0)
        plant.update(**_IDEAL)
        assert plant.health == pytest.approx(50.0 + 1.2 + 0.6 + 0.5 + 0.2 + 0.15)

    def test_cold_penalty_scales_with_deviation(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, health=50.0, water_level=55.0)
        plant.update(temperature=50.0, light=60.0, humidity=50.0)
        # 10 degrees below the Tomato minimum of 60
        assert plant.health == pytest.approx(50.0 + 1.2 - 3.5 + 0.5 + 0.2 + 0.15)

    def test_overwatering_penalty(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, health=50.0, water_level=100.0)
        plant.update(**_IDEAL)
        assert plant.health == pytest.approx(50.0 - 0.5 + 0.6 + 0.5 + 0.2 + 0.15)

    def test_high_humidity_penalty(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, health=50.0, water_level=55.0)
        plant.update(temperature=68.0, light=60.0, humidity=100.0)
        assert plant.health == pytest.approx(50.0 + 1.2 + 0.6 + 0.5 + 0.2 - 0.8)

    def test_levels_stay_bounded(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, water_level=0.5, nutrient_level=0.1)
        for _ in range(300):
            plant.update(**_IDEAL)
            assert 0.0 <= plant.health <= 100.0
            assert 0.0 <= plant.water_level <= 100.0
            assert 0.0 <= plant.nutrient_level <= 100.0

    def test_dehydration_warning_at_zero_water(self, tomato: PlantSpecies) -> None:
        sink = MemoryEventSink()
        plant = _plant(tomato, sink=sink, water_level=1.0)
        plant.update(**_IDEAL)
        assert any("critically dehydrated" in m for m in sink.messages())


class TestDailyLightIntegral:
    """Tests for the daily light evaluation."""

    def _run_day(self, plant: Plant, light: float) -> None:
        for _ in range(DAY_CYCLE_TICKS):
            plant.water_level = 55.0
            plant.nutrient_level = 50.0
            plant.update(temperature=68.0, light=light, humidity=50.0)

    def test_full_light_caps_satisfaction(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato)
        self._run_day(plant, light=100.0)
        assert plant.light_satisfaction == pytest.approx(2.0)
        assert plant.light_ticks == 0
        assert plant.light_accumulator == 0.0

    def test_dim_light_warns(self, tomato: PlantSpecies) -> None:
        sink = MemoryEventSink()
        plant = _plant(tomato, sink=sink)
        self._run_day(plant, light=10.0)
        # 10 % all day is 2.4 hours against a need of 8
        assert plant.light_satisfaction == pytest.approx(0.3)
        assert any("light deficit" in m for m in sink.messages(Category.PLANT))

    def test_evaluates_on_configured_day_length(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, day_length=100)
        for _ in range(100):
            plant.water_level = 55.0
            plant.update(temperature=68.0, light=100.0, humidity=50.0)
        assert plant.light_satisfaction == pytest.approx(2.0)
        assert plant.light_ticks == 0

    def test_satisfaction_unchanged_mid_day(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato)
        for _ in range(DAY_CYCLE_TICKS - 1):
            plant.water_level = 55.0
            plant.update(temperature=68.0, light=0.0, humidity=50.0)
        assert plant.alive
        assert plant.light_satisfaction == 1.0


class TestGrowth:
    """Tests for stage progression, wilting and death."""

    def test_advances_one_stage_per_interval(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato)
        for _ in range(tomato.ticks_to_next_stage):
            plant.water_level = 55.0
            plant.update(**_IDEAL)
        assert plant.stage is GrowthStage.SPROUT

    def test_stage_never_regresses(self) -> None:
        lettuce = plant_species("Lettuce")
        plant = _plant(lettuce)
        order = [GrowthStage.SEED]
        for _ in range(lettuce.ticks_to_next_stage * 8):
            plant.water_level = 55.0
            plant.nutrient_level = 50.0
            plant.update(**_IDEAL)
            if plant.stage is not order[-1]:
                order.append(plant.stage)
        assert order == [
            GrowthStage.SEED,
            GrowthStage.SPROUT,
            GrowthStage.VEGETATIVE,
            GrowthStage.FLOWERING,
            GrowthStage.FRUITING,
            GrowthStage.MATURE,
        ]

    def test_no_growth_when_unhealthy(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, health=25.0, water_level=55.0, age=49)
        plant.update(temperature=50.0, light=60.0, humidity=50.0)
        assert plant.health <= 30.0
        assert plant.stage is GrowthStage.SEED

    def test_wilting_below_twenty(self, tomato: PlantSpecies) -> None:
        sink = MemoryEventSink()
        plant = _plant(tomato, sink=sink, health=19.5, water_level=5.0)
        plant.update(**_IDEAL)
        assert plant.stage is GrowthStage.WILTING
        assert sink.by_level(Level.WARN)

    def test_wilting_plant_does_not_grow(self, tomato: PlantSpecies) -> None:
        plant = _plant(
            tomato,
            health=40.0,
            water_level=55.0,
            stage=GrowthStage.WILTING,
            age=49,
        )
        plant.update(**_IDEAL)
        assert plant.stage is GrowthStage.WILTING

    def test_dies_at_zero_health(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, health=0.5, water_level=5.0)
        plant.update(**_IDEAL)
        assert not plant.alive
        assert plant.stage is GrowthStage.DEAD
        assert plant.health == 0.0

    def test_dead_plant_is_frozen(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, health=0.5, water_level=5.0)
        plant.update(**_IDEAL)
        age, water = plant.age, plant.water_level
        plant.update(**_IDEAL)
        plant.water(50.0)
        plant.fertilize(50.0)
        assert plant.apply_pest_damage(10.0) == 0.0
        assert plant.age == age
        assert plant.water_level == water
        assert plant.stage is GrowthStage.DEAD


class TestMutators:
    """Tests for watering, fertilizing and pest damage."""

    def test_starting_levels_clamped(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, health=150.0, water_level=-5.0, nutrient_level=120.0)
        assert plant.health == 100.0
        assert plant.water_level == 0.0
        assert plant.nutrient_level == 100.0

    def test_water_caps_at_hundred(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, water_level=95.0)
        plant.water(20.0)
        assert plant.water_level == 100.0

    def test_silent_watering_emits_nothing(self, tomato: PlantSpecies) -> None:
        sink = MemoryEventSink()
        plant = _plant(tomato, sink=sink)
        sink.clear()
        plant.water(5.0, silent=True)
        plant.add_nutrients(5.0)
        assert len(sink) == 0

    def test_fertilize_emits_event(self, tomato: PlantSpecies) -> None:
        sink = MemoryEventSink()
        plant = _plant(tomato, sink=sink)
        plant.fertilize(20.0)
        assert plant.nutrient_level == 70.0
        assert any("fertilized" in m for m in sink.messages())

    def test_pest_damage_reduced_by_resistance(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato)
        effective = plant.apply_pest_damage(1.0)
        assert effective == pytest.approx(0.7)
        assert plant.health == pytest.approx(99.3)

    def test_pest_damage_can_kill(self, tomato: PlantSpecies) -> None:
        plant = _plant(tomato, health=0.5)
        plant.apply_pest_damage(10.0)
        assert not plant.alive
        assert plant.stage is GrowthStage.DEAD

    def test_planting_emits_event(self, tomato: PlantSpecies) -> None:
        sink = MemoryEventSink()
        _plant(tomato, sink=sink)
        assert "Solanum lycopersicum" in sink.messages(Category.PLANT)[0]
