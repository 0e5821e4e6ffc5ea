"""
Ooit Gedacht - Prompt Logger.

Logs image generation prompts and outcomes to files for debugging.
Enabled via OOIT_LOG_PROMPTS=1 or the --log-prompts CLI flag.
"""

import os
from datetime import datetime
from pathlib import Path

# Configuration
LOG_PROMPTS = os.getenv("OOIT_LOG_PROMPTS", "0") == "1"
LOG_DIR = Path("prompt_logs")

# Session tracking
_session_id: str | None = None
_call_counter: int = 0


def enable_prompt_logging(enabled: bool = True) -> None:
    """Enable or disable prompt logging."""
    global LOG_PROMPTS
    LOG_PROMPTS = enabled
    if enabled:
        _ensure_log_dir()


def _ensure_log_dir() -> None:
    """Create the log directory if it doesn't exist."""
    LOG_DIR.mkdir(exist_ok=True)


def _get_session_id() -> str:
    """Get or create a session ID for this run."""
    global _session_id
    if _session_id is None:
        _session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    return _session_id


def _get_session_dir() -> Path:
    """Get the directory for this session's logs."""
    session_dir = LOG_DIR / _get_session_id()
    session_dir.mkdir(exist_ok=True)
    return session_dir


def _describe_image(result: str) -> str:
    """Summarize a data URI without dumping the base64 payload."""
    if result.startswith("data:"):
        header, _, payload = result.partition(",")
        return f"{header} ({len(payload)} base64 chars)"
    return result[:200]


def log_prompt(
    *,
    node: str,
    model: str,
    prompt: str,
    result: str | None = None,
    error: str | None = None,
    config: dict | None = None,
) -> Path | None:
    """
    Log a generation prompt and its outcome to a markdown file.

    Args:
        node: Which caller made this request (e.g. "generate_home")
        model: The image model used
        prompt: The full prompt text
        result: The returned image (data URI or URL), if any
        error: Any error that occurred
        config: Request parameters such as size

    Returns:
        Path to the log file, or None if logging is disabled
    """
    if not LOG_PROMPTS:
        return None

    global _call_counter
    _call_counter += 1

    _ensure_log_dir()
    session_dir = _get_session_dir()

    filename = f"{_call_counter:02d}_{node}.md"
    filepath = session_dir / filename

    config_str = ""
    if config:
        config_str = "\n**Config:** " + ", ".join(f"{k}={v}" for k, v in config.items())

    content = f"""# Generation Call: {node}

**Time:** {datetime.now().isoformat()}
**Model:** {model}{config_str}

---

## Prompt

```
{prompt}
```

---

## Result

"""

    if error:
        content += f"**ERROR:** {error}\n"
    elif result:
        content += f"`{_describe_image(result)}`\n"
    else:
        content += "(No result)\n"

    filepath.write_text(content, encoding="utf-8")

    return filepath


def get_session_log_dir() -> Path | None:
    """Get the current session's log directory, if logging is enabled."""
    if not LOG_PROMPTS:
        return None
    return _get_session_dir()


def reset_session() -> None:
    """Reset the session (for testing or a new wizard run)."""
    global _session_id, _call_counter
    _session_id = None
    _call_counter = 0
