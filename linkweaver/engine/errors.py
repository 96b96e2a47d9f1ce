"""Exceptions raised by the link injection engine."""

from __future__ import annotations


class LinkweaverError(Exception):
    """Base class for engine errors."""


class StructuralError(LinkweaverError):
    """The document cannot be processed without emitting corrupt HTML."""


class ConfigError(LinkweaverError, ValueError):
    """An injection option is out of range or inconsistent."""
