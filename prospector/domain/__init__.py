"""Domain models for the opportunity prospector."""

from .models import DESCRIPTION_MAX_LENGTH, Opportunity, OpportunitySource

__all__ = ["Opportunity", "OpportunitySource", "DESCRIPTION_MAX_LENGTH"]
