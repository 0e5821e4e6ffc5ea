"""
Ooit Gedacht - Image Generation.

Provides the generation service used by the wizard orchestrator.
"""

from ooit.llm.client import generate_dream_home, generate_placeholder_home, get_client

__all__ = [
    "get_client",
    "generate_dream_home",
    "generate_placeholder_home",
]
