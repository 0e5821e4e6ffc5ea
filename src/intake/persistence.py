"""
Session persistence for the wizard.

Two independent slots live in one key-value store:
- Wizard progress: preferences + current step, expires after 24h
- Dashboard handoff: final preferences + image, no expiry

Storage problems never reach the user. A failed read means "no saved
session", a failed write is skipped. Both are logged.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .state import AppState, UserPreferences

logger = logging.getLogger(__name__)


WIZARD_STORAGE_KEY = "ooit-gedacht-wizard-progress"
DASHBOARD_STORAGE_KEY = "ooit-gedacht-dashboard"
SNAPSHOT_VERSION = 1
DEFAULT_TTL_HOURS = 24


# =============================================================================
# Key-value stores
# =============================================================================


class KeyValueStore(ABC):
    """Minimal string store. Implementations may raise on failure."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    """In-process store, for tests and one-shot runs."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    One file per key inside a directory.

    The directory is created lazily on first write.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


# =============================================================================
# Snapshot shapes
# =============================================================================


class WizardSnapshot(BaseModel):
    """Saved wizard progress. Timestamp is epoch milliseconds."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = SNAPSHOT_VERSION
    preferences: dict[str, Any]
    current_step: AppState = Field(alias="currentStep")
    generated_image: str | None = Field(default=None, alias="generatedImage")
    timestamp: float

    def to_preferences(self) -> UserPreferences:
        return UserPreferences.from_dict(self.preferences)


class DashboardSnapshot(BaseModel):
    """Final wizard outcome handed to the dashboard."""

    preferences: dict[str, Any]
    image: str

    def to_preferences(self) -> UserPreferences:
        return UserPreferences.from_dict(self.preferences)


# =============================================================================
# Session store
# =============================================================================


class SessionStore:
    """
    Reads and writes wizard snapshots over an injected KeyValueStore.

    Usage:
        store = SessionStore(MemoryStore())
        store.save(prefs, AppState.WIZARD_STEP_BUDGET)
        snapshot = store.load()
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_hours: float = DEFAULT_TTL_HOURS,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.ttl_ms = ttl_hours * 3600 * 1000
        self._clock = clock

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def save(
        self,
        preferences: UserPreferences,
        step: AppState,
        image: str | None = None,
    ) -> bool:
        """
        Write wizard progress. Never raises.

        Returns True if the write went through, False if it was skipped.
        """
        snapshot = WizardSnapshot(
            preferences=preferences.to_dict(),
            current_step=step,
            generated_image=image,
            timestamp=self._now_ms(),
        )
        try:
            self.store.set(WIZARD_STORAGE_KEY, snapshot.model_dump_json(by_alias=True))
            return True
        except Exception as e:
            logger.warning(f"Skipped saving wizard progress: {e}")
            return False

    def load(self) -> WizardSnapshot | None:
        """
        Read wizard progress, or None if absent, unreadable, or expired.

        Expired snapshots are removed from the store.
        """
        try:
            raw = self.store.get(WIZARD_STORAGE_KEY)
        except Exception as e:
            logger.warning(f"Failed to read wizard progress: {e}")
            return None

        if not raw:
            return None

        try:
            snapshot = WizardSnapshot.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Ignoring unreadable wizard progress: {e}")
            return None

        if snapshot.version != SNAPSHOT_VERSION:
            logger.info(
                f"Ignoring wizard progress with schema version {snapshot.version} "
                f"(expected {SNAPSHOT_VERSION})"
            )
            return None

        age_ms = self._now_ms() - snapshot.timestamp
        if age_ms > self.ttl_ms:
            logger.info(f"Wizard progress expired ({age_ms / 3_600_000:.1f}h old)")
            self.clear()
            return None

        return snapshot

    def clear(self) -> None:
        """Delete wizard progress. Never raises."""
        try:
            self.store.remove(WIZARD_STORAGE_KEY)
        except Exception as e:
            logger.warning(f"Failed to clear wizard progress: {e}")

    def save_dashboard(self, preferences: UserPreferences, image: str) -> bool:
        """Write the dashboard snapshot (no expiry). Never raises."""
        snapshot = DashboardSnapshot(preferences=preferences.to_dict(), image=image)
        try:
            self.store.set(DASHBOARD_STORAGE_KEY, snapshot.model_dump_json())
            return True
        except Exception as e:
            logger.warning(f"Skipped saving dashboard snapshot: {e}")
            return False

    def load_dashboard(self) -> DashboardSnapshot | None:
        """Read the dashboard snapshot, or None if absent or unreadable."""
        try:
            raw = self.store.get(DASHBOARD_STORAGE_KEY)
        except Exception as e:
            logger.warning(f"Failed to read dashboard snapshot: {e}")
            return None

        if not raw:
            return None

        try:
            return DashboardSnapshot.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Ignoring unreadable dashboard snapshot: {e}")
            return None


def dump_snapshot(snapshot: BaseModel) -> str:
    """Pretty JSON for display (CLI)."""
    return json.dumps(snapshot.model_dump(by_alias=True, mode="json"), indent=2)
