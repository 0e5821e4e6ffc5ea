"""
Derivation rules.

Pure functions computing one preference field from another. The engine calls
them at the moment a step is confirmed and stores the result; nothing here is
re-evaluated on read.
"""

import math
from typing import Iterable, NamedTuple

from .catalog import (
    DEFAULT_MATERIAL,
    DEFAULT_ROOF,
    STYLE_OPTIONS,
    find_size,
)

DEFAULT_SQM = 150


class RoofAndMaterial(NamedTuple):
    roof: str
    material: str


def sqm_from_size(category: str) -> int:
    """
    Floor area for a size category: the midpoint of its range.

    Rounds half up. Unknown categories get DEFAULT_SQM.
    """
    option = find_size(category)
    if option is None:
        return DEFAULT_SQM
    return math.floor((option.sqm_min + option.sqm_max) / 2 + 0.5)


def style_to_roof_and_material(selected_tags: Iterable[str]) -> RoofAndMaterial:
    """
    Infer roof style and material affinity from mood board tags.

    The first entry of STYLE_OPTIONS whose tag was selected wins; the order
    in which the user picked tags is irrelevant. Conflicting later matches
    are ignored.
    """
    selected = set(selected_tags)
    for option in STYLE_OPTIONS:
        if option.tag in selected:
            return RoofAndMaterial(option.inferred_roof, option.inferred_material)
    return RoofAndMaterial(DEFAULT_ROOF, DEFAULT_MATERIAL)


def merge_unique(existing: Iterable[str], added: Iterable[str]) -> list[str]:
    """Ordered union: existing items first, then new ones, no duplicates."""
    return list(dict.fromkeys([*existing, *added]))
