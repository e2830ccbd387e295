"""Output sinks for aggregation results."""

from .writer import (
    OUTPUT_FORMATS,
    opportunity_to_dict,
    serialize_opportunities,
    write_opportunities,
)

__all__ = [
    "OUTPUT_FORMATS",
    "opportunity_to_dict",
    "serialize_opportunities",
    "write_opportunities",
]
