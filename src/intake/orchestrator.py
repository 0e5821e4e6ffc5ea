"""
Generation Orchestrator.

Runs one generation attempt as an asyncio task:
1. Play the cosmetic progress messages in order, sleeping between them
2. Build the prompt and call the generation service exactly once
3. Validate the result, wait a short grace delay, report success

Every attempt gets its own CancellationToken. Superseding or tearing down an
attempt sets the token; each suspension point checks it on resume and drops
its outcome instead of applying it. The task itself is never force-cancelled,
so a slow service call simply finishes into the void.

States: IDLE -> RUNNING -> (IDLE on success | FAILED)
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

from .messages import ProgressStep, get_generation_error, get_generation_steps
from .state import UserPreferences

logger = logging.getLogger(__name__)


GenerationService = Callable[[UserPreferences, str], Awaitable[str]]
PromptBuilder = Callable[[UserPreferences], str]

DEFAULT_MIN_RESULT_LENGTH = 100
DEFAULT_GRACE_DELAY_MS = 500
ERROR_MARKER = "error"


class GenerationStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    FAILED = "failed"


class GenerationError(Exception):
    """The service returned nothing usable."""

    def __init__(self, message: str = "generation failed, try again"):
        super().__init__(message)


class CancellationToken:
    """Write-once flag for a single attempt."""

    def __init__(self, attempt: int):
        self.attempt = attempt
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


def validate_result(result: str | None, min_length: int = DEFAULT_MIN_RESULT_LENGTH) -> str:
    """
    Accept a generated image only if it looks real.

    Raises GenerationError for empty results, results carrying an "error"
    marker, and results no longer than min_length.
    """
    if not result:
        raise GenerationError()
    if ERROR_MARKER in result:
        raise GenerationError()
    if len(result) <= min_length:
        raise GenerationError()
    return result


class GenerationOrchestrator:
    """
    Sequences progress feedback and the real generation call.

    Usage:
        orch = GenerationOrchestrator(service, build_prompt, on_success=show_results)
        orch.start(preferences)     # inside a running event loop
        await orch.wait()
        if orch.status is GenerationStatus.FAILED:
            orch.retry()
    """

    def __init__(
        self,
        service: GenerationService,
        prompt_builder: PromptBuilder,
        *,
        language: str = "nl",
        steps: list[ProgressStep] | None = None,
        min_result_length: int = DEFAULT_MIN_RESULT_LENGTH,
        progress_scale: float = 1.0,
        grace_delay_ms: int = DEFAULT_GRACE_DELAY_MS,
        on_progress: Callable[[int, str], None] | None = None,
        on_success: Callable[[str], None] | None = None,
        on_failure: Callable[[str], None] | None = None,
    ):
        self.service = service
        self.prompt_builder = prompt_builder
        self.language = language
        self.steps = steps if steps is not None else get_generation_steps(language)
        self.min_result_length = min_result_length
        self.progress_scale = progress_scale
        self.grace_delay_ms = grace_delay_ms
        self.on_progress = on_progress
        self.on_success = on_success
        self.on_failure = on_failure

        self.status = GenerationStatus.IDLE
        self.step_index = 0
        self.message = ""
        self.error: str | None = None
        self.result: str | None = None
        self.attempt = 0

        self._preferences: UserPreferences | None = None
        self._token: CancellationToken | None = None
        self._task: asyncio.Task | None = None

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def is_running(self) -> bool:
        return self.status is GenerationStatus.RUNNING

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def start(self, preferences: UserPreferences) -> asyncio.Task:
        """
        Begin a new attempt, superseding any attempt in flight.

        Must be called from within a running event loop.
        """
        loop = asyncio.get_running_loop()
        self.cancel()

        self.attempt += 1
        token = CancellationToken(self.attempt)
        self._token = token
        self._preferences = preferences

        self.status = GenerationStatus.RUNNING
        self.step_index = 0
        self.message = ""
        self.error = None
        self.result = None

        logger.info(f"Generation attempt {token.attempt} started")
        self._task = loop.create_task(self._run(preferences, token))
        return self._task

    def retry(self) -> asyncio.Task | None:
        """Re-run with the same preferences as the last attempt."""
        if self._preferences is None:
            logger.debug("Retry requested before any attempt; ignoring")
            return None
        return self.start(self._preferences)

    def go_back(self) -> None:
        """Abandon generation and clear any failure."""
        self.cancel()
        self.error = None
        self.status = GenerationStatus.IDLE

    def cancel(self) -> None:
        """Mark the current attempt stale. Its outcome will be discarded."""
        if self._token is not None and not self._token.cancelled:
            self._token.cancel()
            if self.status is GenerationStatus.RUNNING:
                logger.info(f"Generation attempt {self._token.attempt} cancelled")
                self.status = GenerationStatus.IDLE

    def close(self) -> None:
        self.cancel()

    async def wait(self) -> None:
        """Wait for the current attempt's task to finish (or be discarded)."""
        if self._task is not None:
            await self._task

    # -------------------------------------------------------------------------
    # Attempt
    # -------------------------------------------------------------------------

    async def _sleep(self, duration_ms: int) -> None:
        delay = duration_ms * self.progress_scale / 1000
        await asyncio.sleep(delay if delay > 0 else 0)

    async def _run(self, preferences: UserPreferences, token: CancellationToken) -> None:
        try:
            for index, step in enumerate(self.steps):
                if token.cancelled:
                    return
                self.step_index = index
                self.message = step.message
                if self.on_progress:
                    self.on_progress(index, step.message)

                await self._sleep(step.duration_ms)
                if token.cancelled:
                    return

            prompt = self.prompt_builder(preferences)
            result = await self.service(preferences, prompt)
            if token.cancelled:
                logger.info(f"Discarding result of superseded attempt {token.attempt}")
                return

            validate_result(result, self.min_result_length)

            await self._sleep(self.grace_delay_ms)
            if token.cancelled:
                return

            self.result = result
            self.status = GenerationStatus.IDLE
            logger.info(f"Generation attempt {token.attempt} succeeded")
            if self.on_success:
                self.on_success(result)

        except Exception:
            if token.cancelled:
                return
            logger.exception(f"Generation attempt {token.attempt} failed")
            self.status = GenerationStatus.FAILED
            self.error = get_generation_error(self.language)
            if self.on_failure:
                self.on_failure(self.error)
