"""
User-facing text for the generation screen, in Dutch and English.
"""

from typing import NamedTuple


class ProgressStep(NamedTuple):
    message: str
    duration_ms: int


GENERATION_MESSAGES: dict[str, list[str]] = {
    "nl": [
        "Analyseren van je huishouden...",
        "Stijlvoorkeuren verwerken...",
        "Materialen en texturen selecteren...",
        "Energiesystemen integreren...",
        "Plattegrond optimaliseren...",
        "Exterieur visualiseren...",
        "Landschapsontwerp toevoegen...",
        "Laatste details afronden...",
        "Je droomhuis staat klaar!",
    ],
    "en": [
        "Analyzing your household...",
        "Processing style preferences...",
        "Selecting materials and textures...",
        "Integrating energy systems...",
        "Optimizing floor plan...",
        "Visualizing exterior...",
        "Adding landscape design...",
        "Finishing final details...",
        "Your dream home is ready!",
    ],
}

GENERATION_DURATIONS_MS = [1500, 2000, 2000, 1500, 2000, 2500, 1500, 1500, 1000]
DEFAULT_DURATION_MS = 1500

GENERATION_ERROR: dict[str, str] = {
    "nl": "Oeps, dat ging niet goed. Probeer het opnieuw.",
    "en": "Oops, something went wrong. Please try again.",
}

GENERATION_ERROR_TIP: dict[str, str] = {
    "nl": "Tip: Controleer je internetverbinding en probeer het opnieuw",
    "en": "Tip: Check your internet connection and try again",
}


def _lang(language: str) -> str:
    return language if language in GENERATION_MESSAGES else "nl"


def get_generation_steps(language: str = "nl") -> list[ProgressStep]:
    """Progress messages paired with how long each stays on screen."""
    messages = GENERATION_MESSAGES[_lang(language)]
    return [
        ProgressStep(
            message,
            GENERATION_DURATIONS_MS[i] if i < len(GENERATION_DURATIONS_MS) else DEFAULT_DURATION_MS,
        )
        for i, message in enumerate(messages)
    ]


def get_generation_error(language: str = "nl") -> str:
    return GENERATION_ERROR[_lang(language)]


def get_generation_error_tip(language: str = "nl") -> str:
    return GENERATION_ERROR_TIP[_lang(language)]
