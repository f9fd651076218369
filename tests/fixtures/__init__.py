"""Shared pytest fixtures and helpers."""

from .catalog import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
