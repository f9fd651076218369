"""Test configuration: pulls the shared fixtures into every test module."""

from tests.fixtures import *  # noqa: F401,F403
