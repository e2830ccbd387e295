"""URL-based deduplication of merged connector output."""

from typing import Iterable, List

from prospector.domain.models import Opportunity


def deduplicate_by_url(opportunities: Iterable[Opportunity]) -> List[Opportunity]:
    """Keep the first record seen for each URL, preserving input order.

    URLs are compared byte-for-byte: no trailing-slash, case or query-string
    normalization. Later duplicates are dropped, never merged.

    Args:
        opportunities: Records concatenated in connector precedence order

    Returns:
        Records with unique URLs in first-seen order
    """
    seen = set()
    unique = []
    for opportunity in opportunities:
        if opportunity.url in seen:
            continue
        seen.add(opportunity.url)
        unique.append(opportunity)
    return unique
