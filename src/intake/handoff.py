"""
Dashboard Handoff.

When the user opens the dashboard, the finished preferences and generated
image move into their own storage slot (no expiry) and the wizard session is
cleared. The dashboard only ever reads that slot, so it keeps working after
the wizard session is gone.
"""

import logging

from .persistence import DashboardSnapshot, SessionStore
from .state import UserPreferences

logger = logging.getLogger(__name__)


PLACEHOLDER_IMAGE = "/generated/mood-v3/houten-polderwoning.png"

DEMO_PREFERENCES: dict = {
    "household": {"type": "couple", "bedrooms": 3},
    "style": {
        "moodBoardSelections": ["Houten Polderwoning"],
        "inferredRoofStyle": "pitched",
        "inferredMaterialAffinity": "wood",
    },
    "config": {
        "size": "family",
        "sqm": 150,
        "material": "wood",
        "energyLevel": "aplus",
        "extras": ["solar", "heat_pump"],
        "vibe": 50,
    },
    "location": {
        "searchQuery": "Ermelo, Gelderland",
        "coordinates": {"lat": 52.3, "lng": 5.6},
    },
    "budget": {"total": 450000, "timeline": "1-2_years"},
}


def demo_snapshot() -> DashboardSnapshot:
    """Static dashboard content for visitors who never finished the wizard."""
    prefs = UserPreferences.from_dict(DEMO_PREFERENCES)
    return DashboardSnapshot(preferences=prefs.to_dict(), image=PLACEHOLDER_IMAGE)


class DashboardHandoff:
    """
    One-shot transfer of the wizard outcome to the dashboard slot.

    The first call to enter_dashboard() with a generated image does the
    work; later calls return the same snapshot without writing it again.
    reset() forgets it so the next wizard run hands off its own result.
    """

    def __init__(self, session_store: SessionStore):
        self.session_store = session_store
        self._snapshot: DashboardSnapshot | None = None

    @property
    def completed(self) -> bool:
        return self._snapshot is not None

    def enter_dashboard(
        self,
        preferences: UserPreferences,
        image: str | None,
    ) -> DashboardSnapshot:
        """
        Hand the final state to the dashboard. Always ends the wizard session.

        Without an image (direct or resumed navigation) the placeholder
        content is shown instead, nothing is written and nothing is cached.
        """
        self.session_store.clear()

        if self._snapshot is not None:
            return self._snapshot

        if not image:
            logger.info("Dashboard opened without a generated image; using placeholder")
            return demo_snapshot()

        snapshot = DashboardSnapshot(preferences=preferences.to_dict(), image=image)
        self.session_store.save_dashboard(preferences, image)
        logger.info("Dashboard snapshot written")
        self._snapshot = snapshot
        return snapshot

    def enter_results_unlocked(self) -> None:
        """Unlocked results end the wizard session without a dashboard write."""
        self.session_store.clear()

    def reset(self) -> None:
        """Forget the handed-off snapshot (a new wizard run starts)."""
        self._snapshot = None

    def load(self) -> DashboardSnapshot:
        """Stored dashboard content, or the placeholder if there is none."""
        return self.session_store.load_dashboard() or demo_snapshot()
