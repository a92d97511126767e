"""Display metadata ("recipes") for the physical quantities a field can hold.

A recipe is looked up by the field's recipe key, e.g. ``"wind,100,25000"`` or
``"0,0,103,2"``. The catalog is a plain object passed to
:func:`earth_grids.build_grid`; nothing here is process-global.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True, slots=True)
class UnitSpec:
    label: str
    factor: float = 1.0
    offset: float = 0.0
    precision: int = 1

    def convert(self, value: float) -> float:
        return value * self.factor + self.offset


@dataclass(frozen=True, slots=True)
class ParticleTuning:
    velocity_scale: float
    max_intensity: float


@dataclass(frozen=True, slots=True)
class RecipeMetadata:
    type: str
    key: str
    description: str
    units: tuple[UnitSpec, ...]
    scale_bounds: tuple[float, float]
    particles: ParticleTuning | None = None


PRESSURE_LEVELS_HPA = (10, 70, 250, 500, 700, 850, 1000)

# Conversions from SI base values.
_KMH = 3.6
_KNOTS = 1.943844
_MPH = 2.236936


def wind_recipe(key: str, description: str) -> RecipeMetadata:
    return RecipeMetadata(
        type="wind",
        key=key,
        description=description,
        units=(
            UnitSpec("km/h", _KMH, precision=0),
            UnitSpec("m/s", precision=1),
            UnitSpec("kn", _KNOTS, precision=0),
            UnitSpec("mph", _MPH, precision=0),
        ),
        scale_bounds=(0.0, 100.0),
        particles=ParticleTuning(velocity_scale=1 / 60000, max_intensity=17),
    )


def ocean_currents_recipe() -> RecipeMetadata:
    return RecipeMetadata(
        type="currents",
        key="ocean,160,15",
        description="Ocean Currents @ Surface",
        units=(
            UnitSpec("m/s", precision=2),
            UnitSpec("km/h", _KMH, precision=1),
            UnitSpec("kn", _KNOTS, precision=1),
            UnitSpec("mph", _MPH, precision=1),
        ),
        scale_bounds=(0.0, 1.5),
        particles=ParticleTuning(velocity_scale=1 / 4400, max_intensity=0.7),
    )


def temp_recipe(key: str, description: str) -> RecipeMetadata:
    return RecipeMetadata(
        type="temp",
        key=key,
        description=description,
        units=(
            UnitSpec("ºC", offset=-273.15, precision=1),
            UnitSpec("ºF", 9 / 5, -459.67, precision=1),
            UnitSpec("K", precision=1),
        ),
        scale_bounds=(193.0, 328.0),
    )


def total_cloud_water_recipe() -> RecipeMetadata:
    return RecipeMetadata(
        type="total_cloud_water",
        key="6,6,200,0",
        description="Total Cloud Water",
        units=(UnitSpec("kg/m²", precision=3),),
        scale_bounds=(0.0, 1.0),
    )


def total_precipitable_water_recipe() -> RecipeMetadata:
    return RecipeMetadata(
        type="total_precipitable_water",
        key="1,3,200,0",
        description="Total Precipitable Water",
        units=(UnitSpec("kg/m²", precision=3),),
        scale_bounds=(0.0, 70.0),
    )


def mean_sea_level_pressure_recipe() -> RecipeMetadata:
    return RecipeMetadata(
        type="mean_sea_level_pressure",
        key="3,1,101,0",
        description="Mean Sea Level Pressure",
        units=(
            UnitSpec("hPa", 1 / 100, precision=0),
            UnitSpec("mmHg", 1 / 133.322387415, precision=0),
            UnitSpec("inHg", 1 / 3386.389, precision=1),
        ),
        scale_bounds=(92000.0, 105000.0),
    )


@dataclass(slots=True)
class RecipeCatalog:
    recipes: dict[str, RecipeMetadata] = field(default_factory=dict)

    @classmethod
    def from_recipes(cls, recipes: Iterable[RecipeMetadata]) -> "RecipeCatalog":
        catalog = cls()
        for recipe in recipes:
            if recipe.key in catalog.recipes:
                raise ValueError(f"Duplicate recipe key: {recipe.key!r}")
            catalog.recipes[recipe.key] = recipe
        return catalog

    def recipe_for(self, key: str) -> RecipeMetadata | None:
        return self.recipes.get(key)

    def keys(self) -> list[str]:
        return list(self.recipes)

    @property
    def overlay_types(self) -> frozenset[str]:
        return frozenset(r.type for r in self.recipes.values()) | {"off"}

    def __contains__(self, key: object) -> bool:
        return key in self.recipes

    def __len__(self) -> int:
        return len(self.recipes)


def default_recipes() -> list[RecipeMetadata]:
    recipes = [
        wind_recipe("wind,103,10", "Wind @ Surface"),
        temp_recipe("0,0,103,2", "Temp @ Surface"),
    ]
    for pressure in PRESSURE_LEVELS_HPA:
        recipes.append(wind_recipe(f"wind,100,{pressure * 100}", f"Wind @ {pressure} hPa"))
        recipes.append(temp_recipe(f"0,0,100,{pressure * 100}", f"Temp @ {pressure} hPa"))
    recipes.append(total_cloud_water_recipe())
    recipes.append(total_precipitable_water_recipe())
    recipes.append(mean_sea_level_pressure_recipe())
    recipes.append(ocean_currents_recipe())
    return recipes


def default_catalog() -> RecipeCatalog:
    return RecipeCatalog.from_recipes(default_recipes())
