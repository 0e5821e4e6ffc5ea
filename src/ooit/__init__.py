"""
Ooit Gedacht - Dream home intake wizard.

Packages:
- ooit: settings, image generation client, prompt logging, CLI
- intake: wizard flow engine and generation orchestrator
"""

__version__ = "1.0.0"
