"""Opportunity Prospector - concurrent lead aggregation from public sources."""

__version__ = "0.1.0"
