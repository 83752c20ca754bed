"""Errors raised while generating reference docs."""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for failures of the docs pipeline."""


class ParseError(GenerationError):
    """The values document could not be parsed into a documentation tree."""


class RenderError(GenerationError):
    """A documentation fragment could not be rendered."""
