"""Test helper utilities for Opportunity Prospector tests."""

from .fixture_connector import FIXTURES_DIR, FixtureConnector, load_fixture_records

__all__ = ["FIXTURES_DIR", "FixtureConnector", "load_fixture_records"]
