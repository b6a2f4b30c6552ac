"""
Versus - LLM-backed Two-Item Comparison Engine

Builds a bias-aware prompt for two items, asks Gemini for a scored pros/cons
comparison, and repairs the answer into a fixed schema with a guaranteed
winner or explicit tie.
"""

__version__ = "1.0.0"

from .server import app
from .settings import Settings

__all__ = ["app", "Settings"]
