"""
Ooit Gedacht Intake Wizard.

Collects a self-build home profile through 13 fixed steps, keeps progress
across restarts, and turns the finished profile into a generated image.

Pieces:
1. State - UserPreferences aggregate and AppState identifiers
2. Derivation - floor area from size, roof/material from mood board styles
3. Sequencer - step transitions
4. Persistence - wizard progress (24h) and dashboard handoff slots
5. Orchestrator - progress messages, generation call, cancellation, retry
6. Engine - the facade a UI or CLI talks to
"""

from .state import AppState, UserPreferences, INTAKE_STEPS
from .persistence import SessionStore, MemoryStore, JsonFileStore
from .orchestrator import GenerationOrchestrator, GenerationError, GenerationStatus
from .engine import WizardEngine, WizardView

__all__ = [
    "AppState",
    "UserPreferences",
    "INTAKE_STEPS",
    "SessionStore",
    "MemoryStore",
    "JsonFileStore",
    "GenerationOrchestrator",
    "GenerationError",
    "GenerationStatus",
    "WizardEngine",
    "WizardView",
]
