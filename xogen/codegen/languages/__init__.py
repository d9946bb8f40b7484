"""
Language-specific generation helpers.
"""

from .go import TemplateFuncs

__all__ = ["TemplateFuncs"]
