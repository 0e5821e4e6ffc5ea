"""
Wizard Engine.

Facade over the intake pieces. A hosting shell (the CLI, or any UI) calls one
completion handler per step and renders whatever `engine.view` says.

Per step:
    handler(partial) -> merge into preferences -> derive -> persist -> advance

After the last step the engine enters GENERATING and starts the orchestrator.
Success moves to RESULTS_LOCKED; the user then unlocks the results or opens
the dashboard, both of which end the saved session.
"""

import asyncio
import copy
import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from .catalog import EXTRAS_BY_CATEGORY
from .derivation import merge_unique, sqm_from_size, style_to_roof_and_material
from .handoff import DashboardHandoff
from .orchestrator import (
    GenerationOrchestrator,
    GenerationService,
    GenerationStatus,
    PromptBuilder,
)
from .persistence import DashboardSnapshot, SessionStore
from .prompt import build_prompt
from .sequencer import FIRST_STEP, LAST_STEP, StepSequencer, advance, is_intake_step
from .state import AppState, UserPreferences, create_default_preferences

logger = logging.getLogger(__name__)


EXTRAS_STEPS: dict[str, AppState] = {
    "energy": AppState.WIZARD_STEP_EXTRAS_ENERGY,
    "outdoor": AppState.WIZARD_STEP_EXTRAS_OUTDOOR,
    "comfort": AppState.WIZARD_STEP_EXTRAS_COMFORT,
}


@dataclass(frozen=True)
class WizardView:
    """Read-only picture of the engine for the hosting shell."""
    app_state: AppState
    preferences: UserPreferences
    generated_image: str | None
    generation_step: int
    generation_message: str
    generation_error: str | None
    is_generating: bool
    current_step_index: int
    total_steps: int


class WizardEngine:
    """
    Drives the intake flow and the generation attempt.

    Saved progress is loaded exactly once, here in the constructor.
    """

    def __init__(
        self,
        session_store: SessionStore,
        service: GenerationService,
        prompt_builder: PromptBuilder = build_prompt,
        *,
        language: str = "nl",
        min_result_length: int = 100,
        progress_scale: float = 1.0,
        grace_delay_ms: int = 500,
        on_state_change: Callable[[AppState], None] | None = None,
        on_progress: Callable[[int, str], None] | None = None,
    ):
        self.session_store = session_store
        self.handoff = DashboardHandoff(session_store)
        self.language = language
        self._listener = on_state_change

        snapshot = session_store.load()
        if snapshot is not None:
            logger.info(f"Resuming wizard at {snapshot.current_step.value}")
            self.preferences = snapshot.to_preferences()
            self.generated_image = snapshot.generated_image
            initial = snapshot.current_step
        else:
            self.preferences = create_default_preferences()
            self.generated_image = None
            initial = FIRST_STEP

        self.sequencer = StepSequencer(initial, on_state_change=self._on_state_change)
        self.orchestrator = GenerationOrchestrator(
            service,
            prompt_builder,
            language=language,
            min_result_length=min_result_length,
            progress_scale=progress_scale,
            grace_delay_ms=grace_delay_ms,
            on_progress=on_progress,
            on_success=self._on_generation_success,
            on_failure=self._on_generation_failure,
        )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> AppState:
        return self.sequencer.state

    @property
    def view(self) -> WizardView:
        orch = self.orchestrator
        return WizardView(
            app_state=self.state,
            preferences=copy.deepcopy(self.preferences),
            generated_image=self.generated_image,
            generation_step=orch.step_index,
            generation_message=orch.message,
            generation_error=orch.error,
            is_generating=self.state is AppState.GENERATING,
            current_step_index=self.sequencer.current_step_index,
            total_steps=self.sequencer.total_steps,
        )

    def _persist(self) -> None:
        if is_intake_step(self.state):
            self.session_store.save(self.preferences, self.state, self.generated_image)

    def _on_state_change(self, state: AppState) -> None:
        if state is not AppState.GENERATING:
            # Leaving the generation screen by any route makes the attempt stale
            self.orchestrator.cancel()

        if state is AppState.GENERATING:
            self._start_generation()
        elif state is AppState.RESULTS_UNLOCKED:
            self.handoff.enter_results_unlocked()
        elif state is AppState.DASHBOARD:
            self.handoff.enter_dashboard(self.preferences, self.generated_image)

        self._persist()
        if self._listener:
            self._listener(state)

    def _complete(self, step: AppState) -> AppState:
        """Persist the merged partial at its own step, then move on."""
        self._persist()
        return self.sequencer.go_to(advance(step))

    # =========================================================================
    # Step completion handlers
    # =========================================================================

    def complete_type(self, household_type: str) -> AppState:
        self.preferences.household.type = household_type
        return self._complete(AppState.WIZARD_STEP_TYPE)

    def complete_bedrooms(
        self,
        bedrooms: int,
        work_from_home: bool | None = None,
        pets: bool | None = None,
        accessibility: bool | None = None,
    ) -> AppState:
        household = self.preferences.household
        household.bedrooms = bedrooms
        if work_from_home is not None:
            household.work_from_home = work_from_home
        if pets is not None:
            household.pets = pets
        if accessibility is not None:
            household.accessibility = accessibility
        return self._complete(AppState.WIZARD_STEP_BEDROOMS)

    def complete_budget(self, total: int, financing_status: str | None = None) -> AppState:
        self.preferences.budget.total = total
        if financing_status is not None:
            self.preferences.budget.financing_status = financing_status
        return self._complete(AppState.WIZARD_STEP_BUDGET)

    def complete_timeline(self, timeline: str) -> AppState:
        self.preferences.budget.timeline = timeline
        return self._complete(AppState.WIZARD_STEP_TIMELINE)

    def complete_location(
        self,
        search_query: str,
        coordinates: dict | None = None,
        has_land: str | None = None,
        plot_size: str | None = None,
        garden_orientation: str | None = None,
    ) -> AppState:
        location = self.preferences.location
        location.search_query = search_query
        if coordinates is not None:
            location.coordinates = coordinates
        if has_land is not None:
            location.has_land = has_land
        if plot_size is not None:
            location.plot_size = plot_size
        if garden_orientation is not None:
            location.garden_orientation = garden_orientation
        return self._complete(AppState.WIZARD_STEP_LOCATION)

    def complete_style(self, tags: Iterable[str]) -> AppState:
        """
        Confirm mood board selections.

        Roof and material are inferred from exactly these tags, right now,
        and stored. They are not touched again by later steps.
        """
        tags = list(dict.fromkeys(tags))
        inferred = style_to_roof_and_material(tags)

        style = self.preferences.style
        style.mood_board_selections = tags
        style.inferred_roof_style = inferred.roof
        style.inferred_material_affinity = inferred.material
        # Material step opens on the inferred value
        self.preferences.config.material = inferred.material
        return self._complete(AppState.WIZARD_STEP_STYLE)

    def complete_size(self, size: str) -> AppState:
        self.preferences.config.size = size
        self.preferences.config.sqm = sqm_from_size(size)
        return self._complete(AppState.WIZARD_STEP_SIZE)

    def complete_material(self, material: str) -> AppState:
        self.preferences.config.material = material
        return self._complete(AppState.WIZARD_STEP_MATERIAL)

    def complete_energy(self, energy_level: str) -> AppState:
        self.preferences.config.energy_level = energy_level
        return self._complete(AppState.WIZARD_STEP_ENERGY)

    def complete_extras(self, category: str, extras: Iterable[str]) -> AppState:
        """
        Confirm one extras page.

        Replaces the extras belonging to this page's category and keeps the
        ones picked on the other pages.
        """
        if category not in EXTRAS_STEPS:
            raise ValueError(f"Unknown extras category: {category}")
        own = set(EXTRAS_BY_CATEGORY[category])
        kept = [e for e in self.preferences.config.extras if e not in own]
        self.preferences.config.extras = merge_unique(kept, extras)
        return self._complete(EXTRAS_STEPS[category])

    def complete_vibe(self, vibe: int) -> AppState:
        """Last step: store the vibe and kick off generation."""
        self.preferences.config.vibe = vibe
        return self._complete(AppState.WIZARD_STEP_VIBE)

    # =========================================================================
    # Navigation
    # =========================================================================

    def back(self) -> AppState:
        """Go one step back. From the generation screen, back to the last step."""
        if self.state is AppState.GENERATING:
            return self.go_back_from_error()
        return self.sequencer.retreat()

    def go_to(self, state: AppState) -> AppState:
        return self.sequencer.go_to(state)

    def reset(self) -> AppState:
        """Start over with default preferences."""
        self.orchestrator.cancel()
        self.preferences = create_default_preferences()
        self.generated_image = None
        self.handoff.reset()
        self.session_store.clear()
        # Entering the first step saves a fresh default snapshot over the cleared key
        return self.sequencer.go_to(FIRST_STEP)

    def unlock_results(self) -> AppState:
        return self.sequencer.go_to(AppState.RESULTS_UNLOCKED)

    def open_dashboard(self) -> AppState:
        return self.sequencer.go_to(AppState.DASHBOARD)

    def dashboard(self) -> DashboardSnapshot:
        """What the dashboard should show right now."""
        return self.handoff.load()

    # =========================================================================
    # Generation
    # =========================================================================

    def _start_generation(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; generation starts on engine.start()")
            return
        self.orchestrator.start(self.preferences)

    def _on_generation_success(self, image: str) -> None:
        self.generated_image = image
        self.sequencer.go_to(AppState.RESULTS_LOCKED)

    def _on_generation_failure(self, message: str) -> None:
        if self._listener:
            self._listener(self.state)

    async def start(self) -> None:
        """Start a pending generation (entered without a running loop)."""
        if self.state is AppState.GENERATING and self.orchestrator.status is GenerationStatus.IDLE:
            self.orchestrator.start(self.preferences)

    def retry_generation(self) -> None:
        """Re-run generation with the unchanged preferences."""
        if self.state is not AppState.GENERATING:
            logger.debug(f"Retry ignored in state {self.state.value}")
            return
        self.orchestrator.start(self.preferences)

    def go_back_from_error(self) -> AppState:
        """Leave the generation screen for the last intake step."""
        self.orchestrator.go_back()
        return self.sequencer.go_to(LAST_STEP)

    async def wait_for_generation(self) -> None:
        await self.orchestrator.wait()

    def close(self) -> None:
        """Tear down: any running attempt becomes stale."""
        self.orchestrator.close()
