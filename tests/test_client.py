"""
Tests for the image generation client (OpenAI Images API mocked).
"""

import asyncio
import base64
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from intake.orchestrator import validate_result
from intake.state import create_default_preferences


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def _images_response(b64_json=None, url=None) -> MagicMock:
    image = MagicMock()
    image.b64_json = b64_json
    image.url = url
    resp = MagicMock()
    resp.data = [image]
    return resp


class TestGenerateDreamHome:

    def test_returns_data_uri(self):
        mock_client = MagicMock()
        mock_client.images.generate = AsyncMock(return_value=_images_response(b64_json="QUJD"))

        async def _test():
            with patch("ooit.llm.client.get_client", return_value=mock_client), \
                 patch("ooit.llm.client.log_prompt") as mock_log:
                from ooit.llm.client import generate_dream_home

                result = await generate_dream_home(create_default_preferences(), "a house")
            return result, mock_log

        result, mock_log = _run(_test())
        assert result == "data:image/png;base64,QUJD"
        kwargs = mock_client.images.generate.call_args.kwargs
        assert kwargs["prompt"] == "a house"
        assert kwargs["n"] == 1
        mock_log.assert_called_once()
        assert mock_log.call_args.kwargs["result"] == result

    def test_falls_back_to_url(self):
        mock_client = MagicMock()
        mock_client.images.generate = AsyncMock(
            return_value=_images_response(url="https://cdn.example.com/house.png")
        )

        async def _test():
            with patch("ooit.llm.client.get_client", return_value=mock_client), \
                 patch("ooit.llm.client.log_prompt"):
                from ooit.llm.client import generate_dream_home

                return await generate_dream_home(create_default_preferences(), "a house")

        assert _run(_test()) == "https://cdn.example.com/house.png"

    def test_empty_response_raises_and_logs(self):
        mock_client = MagicMock()
        resp = MagicMock()
        resp.data = []
        mock_client.images.generate = AsyncMock(return_value=resp)

        async def _test():
            with patch("ooit.llm.client.get_client", return_value=mock_client), \
                 patch("ooit.llm.client.log_prompt") as mock_log:
                from ooit.llm.client import generate_dream_home

                with pytest.raises(RuntimeError, match="No image generated"):
                    await generate_dream_home(create_default_preferences(), "a house")
            return mock_log

        mock_log = _run(_test())
        assert mock_log.call_args.kwargs["error"] == "No image generated"


class TestPlaceholder:

    def test_labelled_svg(self):
        from ooit.llm.client import generate_placeholder_home

        prefs = create_default_preferences()
        prefs.style.mood_board_selections = ["Boswoning"]

        result = _run(generate_placeholder_home(prefs, "ignored"))

        assert result.startswith("data:image/svg+xml;base64,")
        svg = base64.b64decode(result.split(",", 1)[1]).decode("utf-8")
        assert "Boswoning" in svg

    def test_passes_result_validation(self):
        from ooit.llm.client import generate_placeholder_home

        result = _run(generate_placeholder_home(create_default_preferences(), ""))
        assert validate_result(result) == result


class TestPromptLogger:

    def test_disabled_by_default(self):
        from ooit.llm import prompt_logger

        assert prompt_logger.log_prompt(node="generate_home", model="m", prompt="p") is None

    def test_writes_markdown_without_payload(self, tmp_path, monkeypatch):
        from ooit.llm import prompt_logger

        monkeypatch.setattr(prompt_logger, "LOG_DIR", tmp_path / "logs")
        monkeypatch.setattr(prompt_logger, "LOG_PROMPTS", True)
        prompt_logger.reset_session()

        path = prompt_logger.log_prompt(
            node="generate_home",
            model="gpt-image-1",
            prompt="A brick house",
            result="data:image/png;base64," + "A" * 500,
            config={"size": "1536x1024"},
        )
        prompt_logger.reset_session()

        text = path.read_text(encoding="utf-8")
        assert path.name == "01_generate_home.md"
        assert "A brick house" in text
        assert "size=1536x1024" in text
        assert "(500 base64 chars)" in text
        assert "A" * 500 not in text
