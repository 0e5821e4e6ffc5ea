"""
Wizard State & Preferences Aggregate.

AppState enumerates every screen the wizard engine can be in: the 13 intake
steps plus the landing and terminal states.

UserPreferences is the single composite object built incrementally across the
intake flow. It is plain data; derivations are applied by the engine at
confirmation time and stored here as values.

Serialized form uses the camelCase field names of the browser snapshot format
so saved progress stays readable across builds.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any
import json


class AppState(Enum):
    """Wizard screens, in flow order."""
    LANDING = "LANDING"

    # Intake steps
    WIZARD_STEP_TYPE = "WIZARD_STEP_TYPE"                      # 1: Household type
    WIZARD_STEP_BEDROOMS = "WIZARD_STEP_BEDROOMS"              # 2: Bedrooms
    WIZARD_STEP_BUDGET = "WIZARD_STEP_BUDGET"                  # 3: Total budget
    WIZARD_STEP_TIMELINE = "WIZARD_STEP_TIMELINE"              # 4: Timeline
    WIZARD_STEP_LOCATION = "WIZARD_STEP_LOCATION"              # 5: Location & land
    WIZARD_STEP_STYLE = "WIZARD_STEP_STYLE"                    # 6: Mood board styles
    WIZARD_STEP_SIZE = "WIZARD_STEP_SIZE"                      # 7: Size category
    WIZARD_STEP_MATERIAL = "WIZARD_STEP_MATERIAL"              # 8: Facade material
    WIZARD_STEP_ENERGY = "WIZARD_STEP_ENERGY"                  # 9: Energy level
    WIZARD_STEP_EXTRAS_ENERGY = "WIZARD_STEP_EXTRAS_ENERGY"    # 10: Energy extras
    WIZARD_STEP_EXTRAS_OUTDOOR = "WIZARD_STEP_EXTRAS_OUTDOOR"  # 11: Outdoor extras
    WIZARD_STEP_EXTRAS_COMFORT = "WIZARD_STEP_EXTRAS_COMFORT"  # 12: Comfort extras
    WIZARD_STEP_VIBE = "WIZARD_STEP_VIBE"                      # 13: Interior vibe

    # Terminal states
    GENERATING = "GENERATING"
    RESULTS_LOCKED = "RESULTS_LOCKED"
    RESULTS_UNLOCKED = "RESULTS_UNLOCKED"
    DASHBOARD = "DASHBOARD"


INTAKE_STEPS: tuple[AppState, ...] = (
    AppState.WIZARD_STEP_TYPE,
    AppState.WIZARD_STEP_BEDROOMS,
    AppState.WIZARD_STEP_BUDGET,
    AppState.WIZARD_STEP_TIMELINE,
    AppState.WIZARD_STEP_LOCATION,
    AppState.WIZARD_STEP_STYLE,
    AppState.WIZARD_STEP_SIZE,
    AppState.WIZARD_STEP_MATERIAL,
    AppState.WIZARD_STEP_ENERGY,
    AppState.WIZARD_STEP_EXTRAS_ENERGY,
    AppState.WIZARD_STEP_EXTRAS_OUTDOOR,
    AppState.WIZARD_STEP_EXTRAS_COMFORT,
    AppState.WIZARD_STEP_VIBE,
)


BUDGET_MIN = 200_000
BUDGET_MAX = 1_500_000


@dataclass
class Household:
    """Step 1-2: Who will live in the house."""
    type: str = "couple"  # single | couple | family | multi_gen | other
    bedrooms: int = 3
    work_from_home: bool = False
    pets: bool = False
    accessibility: bool = False


@dataclass
class Budget:
    """Step 3-4: Money and timing."""
    total: int = 450_000  # Euro, BUDGET_MIN..BUDGET_MAX
    timeline: str = "1-2_years"  # asap | within_year | 1-2_years | flexible
    financing_status: str = "exploring"  # exploring | pre_approved | cash


@dataclass
class Location:
    """Step 5: Where to build."""
    search_query: str = ""
    coordinates: dict | None = None  # {"lat": float, "lng": float}
    has_land: str = "searching"  # yes | searching | undecided
    plot_size: str | None = None  # <300 | 300-500 | 500-1000 | 1000+
    garden_orientation: str = "unknown"  # north | east | south | west | unknown


@dataclass
class Style:
    """
    Step 6: Mood board selections.

    inferred_* are frozen when the style step is confirmed and never
    recomputed afterwards.
    """
    mood_board_selections: list[str] = field(default_factory=list)
    inferred_roof_style: str = "pitched"
    inferred_material_affinity: str = "brick"


@dataclass
class HomeConfig:
    """Step 7-13: The house itself."""
    size: str = "family"  # compact | family | spacious | villa
    sqm: int = 150  # Always the midpoint of the size category
    material: str = "brick"  # wood | brick | concrete | mixed
    energy_level: str = "aplus"  # standard | aplus | neutral | positive
    extras: list[str] = field(default_factory=list)  # Ordered, no duplicates
    vibe: int = 50  # 0 (minimalist) .. 100 (cozy)


# Python attribute -> snapshot key, per section
_WIRE_NAMES: dict[str, dict[str, str]] = {
    "household": {
        "work_from_home": "workFromHome",
    },
    "budget": {
        "financing_status": "financingStatus",
    },
    "location": {
        "search_query": "searchQuery",
        "has_land": "hasLand",
        "plot_size": "plotSize",
        "garden_orientation": "gardenOrientation",
    },
    "style": {
        "mood_board_selections": "moodBoardSelections",
        "inferred_roof_style": "inferredRoofStyle",
        "inferred_material_affinity": "inferredMaterialAffinity",
    },
    "config": {
        "energy_level": "energyLevel",
    },
}

_SECTION_TYPES = {
    "household": Household,
    "budget": Budget,
    "location": Location,
    "style": Style,
    "config": HomeConfig,
}


def _section_to_wire(section: str, data: dict) -> dict:
    names = _WIRE_NAMES.get(section, {})
    return {names.get(key, key): value for key, value in data.items()}


def _section_from_wire(section: str, data: dict) -> dict:
    """Map snapshot keys back to attributes, dropping unknown keys."""
    cls = _SECTION_TYPES[section]
    names = {wire: attr for attr, wire in _WIRE_NAMES.get(section, {}).items()}
    known = set(cls.__dataclass_fields__)
    result = {}
    for key, value in data.items():
        attr = names.get(key, key)
        if attr in known:
            result[attr] = value
    return result


@dataclass
class UserPreferences:
    """
    The wizard aggregate.

    Each step merges a partial into one of the sections; nothing is ever
    removed by navigating back.
    """
    household: Household = field(default_factory=Household)
    budget: Budget = field(default_factory=Budget)
    location: Location = field(default_factory=Location)
    style: Style = field(default_factory=Style)
    config: HomeConfig = field(default_factory=HomeConfig)

    def to_dict(self) -> dict:
        """Serialize to the camelCase snapshot shape."""
        return {
            section: _section_to_wire(section, asdict(getattr(self, section)))
            for section in _SECTION_TYPES
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserPreferences":
        """
        Deserialize from the snapshot shape.

        Missing sections or fields fall back to defaults, so older snapshots
        with fewer fields still load.
        """
        sections = {}
        for section, section_cls in _SECTION_TYPES.items():
            raw = data.get(section)
            if isinstance(raw, dict):
                sections[section] = section_cls(**_section_from_wire(section, raw))
            else:
                sections[section] = section_cls()
        return cls(**sections)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "UserPreferences":
        """Deserialize from JSON string."""
        return cls.from_dict(json.loads(json_str))


def create_default_preferences() -> UserPreferences:
    """Fresh aggregate with the wizard's starting values."""
    return UserPreferences()
