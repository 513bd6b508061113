"""Prompt building and image generation utilities."""

from .image_gen import GENERIC_FAILURE_MESSAGE, GenerationClient, GenerationError
from .prompt_builder import TryOnPromptBuilder

__all__ = ["GENERIC_FAILURE_MESSAGE", "GenerationClient", "GenerationError", "TryOnPromptBuilder"]
