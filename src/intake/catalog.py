"""
Static option tables for the intake wizard.

Order matters for STYLE_OPTIONS: style inference takes the first matching
entry in this table, not the first tag the user picked.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SizeOption:
    value: str
    label: str
    sqm_min: int
    sqm_max: int
    description: str
    bedrooms_typical: int


SIZE_OPTIONS: tuple[SizeOption, ...] = (
    SizeOption("compact", "Compact", 80, 120, "Starterswoning, efficiënt gebruik van ruimte", 2),
    SizeOption("family", "Gezin", 120, 180, "Ruimte voor gezin met kinderen", 3),
    SizeOption("spacious", "Ruim", 180, 250, "Vrijstaand met grote tuin", 4),
    SizeOption("villa", "Villa", 250, 400, "Exclusieve locatie, alle opties", 5),
)


@dataclass(frozen=True)
class StyleOption:
    tag: str
    inferred_roof: str
    inferred_material: str
    character: str
    required_roof: str | None = None  # Overrides the roof line in the prompt


STYLE_OPTIONS: tuple[StyleOption, ...] = (
    StyleOption(
        "Rietgedekte Schuur", "thatched", "wood",
        "Traditional Dutch barn conversion, rustic countryside farmhouse character, "
        "white window frames, exposed oak beams, waterside setting with wooden jetty",
        "AUTHENTIC DUTCH THATCHED ROOF (rieten dak) - thick golden-brown reed thatch, "
        "organic rounded edges. The roof MUST be thatched.",
    ),
    StyleOption(
        "Houten Polderwoning", "pitched", "wood",
        "Scandinavian-Dutch polder aesthetic, grey weathered timber cladding, large "
        "floor-to-ceiling windows with black frames, open polder landscape views",
    ),
    StyleOption(
        "Notariswoning", "mansard", "brick",
        "Stately 1930s Dutch villa character, symmetrical brick proportions, formal "
        "gravel driveway, manicured hedges, decorative dormers",
    ),
    StyleOption(
        "Boswoning", "sedum", "wood",
        "Organic forest dwelling, biophilic design integrated into nature, large glass "
        "walls connecting indoors to forest, green sedum roof with native vegetation",
        "LIVING GREEN SEDUM ROOF - lush low vegetation covering the entire flat or "
        "slightly sloped roof surface, blending with surrounding forest",
    ),
    StyleOption(
        "Dorpswoning", "pitched", "brick",
        "Traditional Dutch village house, symmetrical facade with stepped gable, white "
        "painted window frames, classic red brick proportions",
    ),
    StyleOption(
        "Strandvilla", "flat", "concrete",
        "Luxurious Dutch coastal architecture, light stucco walls, large balconies and "
        "terraces, floor-to-ceiling glass, dune landscape with beach grass",
    ),
    StyleOption(
        "Industrieel Loft", "flat", "mixed",
        "Converted warehouse building, exposed steel beams and brick walls, large "
        "steel-framed windows, raw urban character",
        "FLAT INDUSTRIAL ROOF or SAW-TOOTH FACTORY ROOF - industrial silhouette with "
        "large skylights",
    ),
    StyleOption(
        "Japandi Villa", "flat", "wood",
        "Minimalist Japanese-Scandinavian fusion, natural light wood, large frameless "
        "windows, zen courtyard garden, wabi-sabi aesthetic",
        "FLAT MINIMALIST ROOF - clean horizontal lines, minimal overhang, pure "
        "geometric simplicity",
    ),
)


DEFAULT_ROOF = "pitched"
DEFAULT_MATERIAL = "brick"


ROOF_PROMPT_HINTS: dict[str, str] = {
    "pitched": "traditional pitched gable roof",
    "flat": "modern flat roof design",
    "sedum": "green sedum living roof",
    "mansard": "classic mansard roof with dormers",
    "thatched": "traditional Dutch thatched roof",
}

MATERIAL_DESCRIPTIONS: dict[str, str] = {
    "wood": "TIMBER-CLAD WALLS - vertical or horizontal wooden planks, grey-weathered, "
            "natural honey, or black-stained Douglas fir.",
    "brick": "BRICK WALLS - traditional Dutch handmade bricks in warm red-brown tones "
             "with visible mortar joints.",
    "concrete": "CONCRETE OR STUCCO WALLS - smooth rendered finish or exposed concrete "
                "panels, clean minimalist surfaces.",
    "mixed": "MIXED MATERIAL WALLS - brick base with wood or render upper sections.",
}

HOUSEHOLD_DESCRIPTIONS: dict[str, str] = {
    "single": "Alleenstaand",
    "couple": "Stel zonder kinderen",
    "family": "Gezin met kinderen",
    "multi_gen": "Meerdere generaties",
    "other": "Andere samenstelling",
}

ENERGY_FEATURES: dict[str, list[str]] = {
    "standard": [],
    "aplus": ["triple-glazed windows", "discrete heat pump unit visible"],
    "neutral": [
        "solar panels covering significant roof area",
        "heat pump unit",
        "modern energy-efficient design",
    ],
    "positive": [
        "MAXIMUM solar panel coverage on all suitable roof surfaces",
        "prominent heat pump system",
        "visible battery storage unit",
        "smart home technology",
    ],
}


EXTRAS_BY_CATEGORY: dict[str, tuple[str, ...]] = {
    "energy": ("solar", "ev_charger", "heat_pump", "battery_storage", "sedum_roof", "rainwater"),
    "outdoor": ("garage", "carport", "outdoor_kitchen", "pool"),
    "comfort": ("office", "sauna"),
}

EXTRA_VISUALS: dict[str, str] = {
    "garage": "ATTACHED GARAGE - integrated into house design with automatic sectional door",
    "carport": "WOODEN CARPORT - open-sided timber structure adjacent to house",
    "solar": "BLACK MONOCRYSTALLINE SOLAR PANELS - integrated on roof surface, 16-20 panels",
    "ev_charger": "EV CHARGING STATION - wall-mounted charger on driveway pillar or garage wall",
    "heat_pump": "AIR SOURCE HEAT PUMP - modern white outdoor unit, discreetly placed",
    "battery_storage": "HOME BATTERY SYSTEM - sleek wall-mounted unit on exterior wall",
    "office": "SEPARATE HOME OFFICE - distinct architectural element or wing of the house",
    "rainwater": "RAINWATER HARVESTING - rain barrel or collection visible, downspouts to storage",
    "outdoor_kitchen": "OUTDOOR KITCHEN AREA - built-in BBQ island, covered terrace dining area",
    "pool": "SWIMMING POOL - rectangular pool or natural swimming pond with deck and sun loungers",
    "sauna": "OUTDOOR SAUNA CABIN - freestanding wooden sauna house in garden",
}

PLOT_DESCRIPTIONS: dict[str, str] = {
    "1000+": "EXPANSIVE ESTATE PLOT (1000+ m²) - generous setbacks, room for pool and outbuildings",
    "500-1000": "SPACIOUS PLOT (500-1000 m²) - mature landscaping, good privacy",
    "300-500": "WELL-PROPORTIONED SUBURBAN PLOT (300-500 m²) - front and back garden",
    "<300": "COMPACT URBAN PLOT (<300 m²) - efficient use of space, small private garden",
}


def find_size(value: str) -> SizeOption | None:
    """Look up a size category, or None if unknown."""
    for option in SIZE_OPTIONS:
        if option.value == value:
            return option
    return None


def find_style(tag: str) -> StyleOption | None:
    """Look up a style by its mood board tag."""
    for option in STYLE_OPTIONS:
        if option.tag == tag:
            return option
    return None
