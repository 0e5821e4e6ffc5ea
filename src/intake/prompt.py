"""
Prompt builder for the dream home image.

Pure function of the preferences. Hard requirements (roof, facade, size) go
first so the model weighs them most; mood and setting follow.
"""

from .catalog import (
    ENERGY_FEATURES,
    EXTRA_VISUALS,
    HOUSEHOLD_DESCRIPTIONS,
    MATERIAL_DESCRIPTIONS,
    PLOT_DESCRIPTIONS,
    ROOF_PROMPT_HINTS,
    find_size,
    find_style,
)
from .state import UserPreferences

BACKYARD_EXTRAS = ("pool", "sauna", "outdoor_kitchen")

SEDUM_ROOF = (
    "GREEN SEDUM LIVING ROOF - lush low vegetation covering the roof surface, "
    "eco-friendly, wildflowers and sedums visible"
)


def _vibe_atmosphere(vibe: int) -> tuple[str, str]:
    """(exterior, landscaping) for a 0-100 vibe value."""
    if vibe < 20:
        return (
            "Ultra-minimalist, stark geometric forms, monochromatic palette, zero ornamentation",
            "Minimalist zen garden with gravel, single specimen tree, clean geometric hedges",
        )
    if vibe < 40:
        return (
            "Modern clean lines, subtle material contrasts, refined detailing",
            "Structured modern garden with ornamental grasses, clipped hedges, stepping stones",
        )
    if vibe < 60:
        return (
            "Balanced contemporary Dutch, warm material palette, welcoming proportions",
            "Traditional Dutch garden with lawn, perennial borders, mature trees, brick pathway",
        )
    if vibe < 80:
        return (
            "Warm natural materials dominate, wood and brick textures, cottage-like charm",
            "Lush romantic garden with flowering shrubs, climbing roses, fruit trees",
        )
    return (
        "Rustic Dutch countryside character, weathered natural materials, historic charm",
        "Wild cottage garden with native flowers, vegetable patch, weathered wooden fence",
    )


def _budget_quality(total: int) -> str:
    if total > 1_000_000:
        return "Ultra-luxury estate: museum-quality finishes, statement architecture"
    if total > 800_000:
        return "Luxury villa: premium materials, bespoke details, high-end finishes"
    if total > 500_000:
        return "High-quality home: carefully selected materials, excellent craftsmanship"
    if total > 350_000:
        return "Quality family home: solid construction, tasteful materials"
    return "Smart efficient design: clever use of space, cost-effective yet attractive materials"


def _scale(bedrooms: int) -> str:
    if bedrooms >= 6:
        return "grand estate villa, imposing presence"
    if bedrooms >= 5:
        return "large luxury family villa"
    if bedrooms >= 4:
        return "substantial family home"
    if bedrooms >= 3:
        return "comfortable family home"
    return "compact modern dwelling"


def _roof_line(prefs: UserPreferences, primary_style: str) -> str:
    # Sedum extra beats the style, the style beats the inferred roof
    if "sedum_roof" in prefs.config.extras:
        return SEDUM_ROOF
    style = find_style(primary_style)
    if style and style.required_roof:
        return style.required_roof
    return ROOF_PROMPT_HINTS.get(prefs.style.inferred_roof_style, ROOF_PROMPT_HINTS["pitched"])


def _location_context(search_query: str) -> str:
    parts = [p.strip() for p in search_query.split(",")]
    if not parts or not parts[0]:
        return "Dutch countryside"
    if len(parts) > 1 and parts[1]:
        return f"{parts[0]}, {parts[1]}, Netherlands"
    return f"{parts[0]}, Netherlands"


def _section(title: str, lines: list[str]) -> str:
    return f"## {title}\n" + "\n".join(lines)


def build_prompt(prefs: UserPreferences) -> str:
    """Build the full image prompt for a completed wizard."""
    selections = prefs.style.mood_board_selections
    primary_style = selections[0] if selections else ""
    secondary_styles = selections[1:]
    style = find_style(primary_style)
    character = style.character if style else "Contemporary Dutch residential character"

    size = find_size(prefs.config.size)
    size_line = (
        f"{size.description}, {prefs.config.sqm} m² total floor area"
        if size else f"{prefs.config.sqm} m² home"
    )
    household = HOUSEHOLD_DESCRIPTIONS.get(prefs.household.type, "family")
    exterior, landscaping = _vibe_atmosphere(prefs.config.vibe)

    extras = [EXTRA_VISUALS[e] for e in prefs.config.extras if e in EXTRA_VISUALS]
    energy = ENERGY_FEATURES.get(prefs.config.energy_level, [])
    plot = PLOT_DESCRIPTIONS.get(prefs.location.plot_size or "", PLOT_DESCRIPTIONS["300-500"])

    sections = [
        "GENERATE A PHOTOREALISTIC ARCHITECTURAL PHOTOGRAPH OF A DUTCH FAMILY HOME.",
        _section("1. ROOF TYPE (MUST MATCH EXACTLY)", [_roof_line(prefs, primary_style)]),
        _section(
            "2. FACADE/WALL MATERIAL (MUST MATCH EXACTLY)",
            [MATERIAL_DESCRIPTIONS.get(prefs.config.material, "Traditional Dutch brick walls")],
        ),
        _section("3. HOUSE SIZE", [
            size_line,
            f"Scale: {_scale(prefs.household.bedrooms)}",
            f"Bedrooms: {prefs.household.bedrooms}",
            f"For: {household} household",
        ]),
        _section("ARCHITECTURAL STYLE & CHARACTER", [
            f"Primary style: {primary_style or 'Contemporary Dutch'}",
            character,
            *([f"Secondary influences: {', '.join(secondary_styles)}"] if secondary_styles else []),
        ]),
        _section("DESIGN ATMOSPHERE", [exterior]),
        _section("QUALITY LEVEL", [_budget_quality(prefs.budget.total)]),
    ]

    if energy:
        sections.append(_section("ENERGY SYSTEMS", [f"• {f}" for f in energy]))
    if extras:
        sections.append(_section("EXTRAS & ADDITIONS (MUST BE VISIBLE)", [f"• {e}" for e in extras]))

    sections.append(_section("SETTING & CONTEXT", [
        f"LOCATION: {_location_context(prefs.location.search_query)}",
        f"PLOT: {plot}",
        f"LANDSCAPING: {landscaping}",
    ]))

    if any(e in prefs.config.extras for e in BACKYARD_EXTRAS):
        camera = [
            "- ELEVATED 3/4 AERIAL PERSPECTIVE showing BOTH front facade AND backyard",
            "- The backyard features MUST be clearly visible in the frame",
        ]
    else:
        camera = [
            "- 3/4 front angle showing facade and entrance",
            "- Ground-level or slightly elevated perspective",
        ]
    sections.append(_section("CAMERA ANGLE", camera))

    sections.append(_section("PHOTOGRAPHY", [
        "- Golden hour lighting, warm natural sunlight, soft shadows",
        "- Ultra photorealistic, NOT a 3D render, NOT an illustration",
        "- ASPECT RATIO: 16:9 landscape",
    ]))
    sections.append(_section("DO NOT INCLUDE", [
        "- People, moving vehicles, text, watermarks or logos",
        "- Any roof type or wall material OTHER than specified above",
        "- Interior views or night time scenes",
    ]))

    return "\n\n".join(sections)
