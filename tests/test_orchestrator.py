"""
Tests for the generation orchestrator.

Cosmetic delays are disabled (progress_scale=0, grace_delay_ms=0) so attempts
run in a handful of event loop turns.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from intake.messages import GENERATION_MESSAGES, get_generation_steps
from intake.orchestrator import (
    CancellationToken,
    GenerationError,
    GenerationOrchestrator,
    GenerationStatus,
    validate_result,
)
from intake.state import create_default_preferences

from conftest import VALID_IMAGE


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def _orchestrator(service, **kwargs) -> GenerationOrchestrator:
    kwargs.setdefault("progress_scale", 0)
    kwargs.setdefault("grace_delay_ms", 0)
    return GenerationOrchestrator(service, lambda prefs: "PROMPT", **kwargs)


class _GatedService:
    """Service that blocks until released, returning queued results in order."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0
        self.started = asyncio.Event()
        self.gates: list[asyncio.Event] = []

    async def __call__(self, preferences, prompt):
        self.calls += 1
        gate = asyncio.Event()
        self.gates.append(gate)
        self.started.set()
        await gate.wait()
        return self.results.pop(0)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidateResult:

    def test_accepts_long_result(self):
        assert validate_result(VALID_IMAGE) == VALID_IMAGE

    @pytest.mark.parametrize("result", [None, "", "short", "x" * 100])
    def test_rejects_empty_or_short(self, result):
        with pytest.raises(GenerationError):
            validate_result(result)

    def test_boundary_length(self):
        assert validate_result("x" * 101) == "x" * 101

    def test_rejects_error_marker(self):
        with pytest.raises(GenerationError):
            validate_result("x" * 200 + "error")

    def test_error_marker_is_case_sensitive(self):
        assert validate_result("ERROR" + "x" * 200)

    def test_custom_min_length(self):
        assert validate_result("x" * 11, min_length=10)


class TestCancellationToken:

    def test_write_once(self):
        token = CancellationToken(attempt=3)
        assert not token.cancelled
        token.cancel()
        token.cancel()
        assert token.cancelled
        assert token.attempt == 3


# ---------------------------------------------------------------------------
# Attempts
# ---------------------------------------------------------------------------


class TestSuccessfulAttempt:

    def test_progress_in_order_then_service(self):
        events = []

        async def service(preferences, prompt):
            events.append(("service", prompt))
            return VALID_IMAGE

        async def _test():
            orch = _orchestrator(
                service,
                on_progress=lambda i, msg: events.append(("progress", i)),
                on_success=lambda image: events.append(("success", image)),
            )
            orch.start(create_default_preferences())
            await orch.wait()
            return orch

        orch = _run(_test())

        assert events[:9] == [("progress", i) for i in range(9)]
        assert events[9] == ("service", "PROMPT")
        assert events[10] == ("success", VALID_IMAGE)
        assert orch.status is GenerationStatus.IDLE
        assert orch.result == VALID_IMAGE
        assert orch.step_index == 8
        assert orch.message == GENERATION_MESSAGES["nl"][-1]

    def test_english_messages(self):
        seen = []
        service = AsyncMock(return_value=VALID_IMAGE)

        async def _test():
            orch = _orchestrator(service, language="en", on_progress=lambda i, m: seen.append(m))
            orch.start(create_default_preferences())
            await orch.wait()

        _run(_test())
        assert seen == GENERATION_MESSAGES["en"]

    def test_service_called_once_with_built_prompt(self):
        service = AsyncMock(return_value=VALID_IMAGE)
        builder = MagicMock(return_value="the prompt")
        prefs = create_default_preferences()

        async def _test():
            orch = GenerationOrchestrator(service, builder, progress_scale=0, grace_delay_ms=0)
            orch.start(prefs)
            await orch.wait()

        _run(_test())
        builder.assert_called_once_with(prefs)
        service.assert_awaited_once_with(prefs, "the prompt")

    def test_start_requires_running_loop(self):
        orch = _orchestrator(AsyncMock(return_value=VALID_IMAGE))
        with pytest.raises(RuntimeError):
            orch.start(create_default_preferences())


class TestFailedAttempt:

    def test_service_exception_fails_with_dutch_message(self):
        failures = []
        service = AsyncMock(side_effect=RuntimeError("quota"))

        async def _test():
            orch = _orchestrator(service, on_failure=failures.append)
            orch.start(create_default_preferences())
            await orch.wait()
            return orch

        orch = _run(_test())
        assert orch.status is GenerationStatus.FAILED
        assert orch.error == "Oeps, dat ging niet goed. Probeer het opnieuw."
        assert failures == [orch.error]
        assert orch.result is None

    @pytest.mark.parametrize("bad", ["", "tiny", "x" * 150 + "error"])
    def test_invalid_result_fails(self, bad):
        service = AsyncMock(return_value=bad)

        async def _test():
            orch = _orchestrator(service, language="en")
            orch.start(create_default_preferences())
            await orch.wait()
            return orch

        orch = _run(_test())
        assert orch.status is GenerationStatus.FAILED
        assert orch.error == "Oops, something went wrong. Please try again."

    def test_retry_reuses_preferences(self):
        service = AsyncMock(side_effect=[RuntimeError("boom"), VALID_IMAGE])
        prefs = create_default_preferences()

        async def _test():
            orch = _orchestrator(service)
            orch.start(prefs)
            await orch.wait()
            assert orch.status is GenerationStatus.FAILED

            orch.retry()
            assert orch.status is GenerationStatus.RUNNING
            assert orch.error is None
            await orch.wait()
            return orch

        orch = _run(_test())
        assert orch.status is GenerationStatus.IDLE
        assert orch.result == VALID_IMAGE
        assert orch.attempt == 2
        assert service.await_args_list[0].args[0] is prefs
        assert service.await_args_list[1].args[0] is prefs

    def test_retry_before_any_attempt_is_ignored(self):
        orch = _orchestrator(AsyncMock())
        assert orch.retry() is None
        assert orch.status is GenerationStatus.IDLE

    def test_go_back_clears_failure(self):
        service = AsyncMock(side_effect=RuntimeError("boom"))

        async def _test():
            orch = _orchestrator(service)
            orch.start(create_default_preferences())
            await orch.wait()
            orch.go_back()
            return orch

        orch = _run(_test())
        assert orch.status is GenerationStatus.IDLE
        assert orch.error is None


class TestCancellation:

    def test_cancelled_attempt_discards_late_result(self):
        successes = []
        failures = []

        async def _test():
            service = _GatedService(VALID_IMAGE)
            orch = _orchestrator(service, on_success=successes.append, on_failure=failures.append)
            orch.start(create_default_preferences())
            await service.started.wait()

            orch.cancel()
            service.gates[0].set()
            await orch.wait()
            return orch

        orch = _run(_test())
        assert successes == []
        assert failures == []
        assert orch.result is None
        assert orch.status is GenerationStatus.IDLE

    def test_cancelled_attempt_discards_late_failure(self):
        failures = []

        async def _test():
            started = asyncio.Event()
            gate = asyncio.Event()

            async def service(preferences, prompt):
                started.set()
                await gate.wait()
                raise RuntimeError("late")

            orch = _orchestrator(service, on_failure=failures.append)
            orch.start(create_default_preferences())
            await started.wait()
            orch.close()
            gate.set()
            await orch.wait()
            return orch

        orch = _run(_test())
        assert failures == []
        assert orch.error is None

    def test_cancel_during_progress_stops_before_service(self):
        service = AsyncMock(return_value=VALID_IMAGE)
        progress = []

        async def _test():
            orch = _orchestrator(service, on_progress=lambda i, m: progress.append(i))
            orch.start(create_default_preferences())
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            orch.cancel()
            await orch.wait()

        _run(_test())
        service.assert_not_awaited()
        assert len(progress) < 9

    def test_new_attempt_supersedes_old(self):
        successes = []

        async def _test():
            service = _GatedService("data:old;" + "a" * 200, "data:new;" + "b" * 200)
            orch = _orchestrator(service, on_success=successes.append)
            prefs = create_default_preferences()

            first = orch.start(prefs)
            await service.started.wait()
            service.started.clear()

            second = orch.start(prefs)
            await service.started.wait()

            # The old call resolves after the new one was launched
            service.gates[0].set()
            await first
            assert successes == []

            service.gates[1].set()
            await second
            return orch

        orch = _run(_test())
        assert len(successes) == 1
        assert successes[0].startswith("data:new;")
        assert orch.attempt == 2
        assert orch.status is GenerationStatus.IDLE


class TestProgressSteps:

    def test_durations(self):
        steps = get_generation_steps("nl")
        assert [s.duration_ms for s in steps] == [1500, 2000, 2000, 1500, 2000, 2500, 1500, 1500, 1000]

    def test_unknown_language_falls_back_to_dutch(self):
        assert get_generation_steps("de") == get_generation_steps("nl")

    def test_error_tip_localized(self):
        from intake.messages import get_generation_error_tip

        assert get_generation_error_tip("nl").startswith("Tip: Controleer")
        assert get_generation_error_tip("en").startswith("Tip: Check")
        assert get_generation_error_tip("fr") == get_generation_error_tip("nl")
