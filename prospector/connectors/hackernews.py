"""Hacker News search connector backed by the Algolia HN API."""

from typing import Any, Dict, List, Optional

from prospector.config.models import ConnectorConfig
from prospector.domain.models import Opportunity, OpportunitySource

from .base import BaseConnector
from .exceptions import ConnectorResponseError


class HackerNewsConnector(BaseConnector):
    """Connector for Hacker News story search.

    API Details:
        Endpoint: https://hn.algolia.com/api/v1/search
        Method: GET
        Authentication: None
        Response: JSON object with a ranked 'hits' array
    """

    CONNECTOR_NAME = "hackernews"
    SOURCE = OpportunitySource.HACKER_NEWS
    API_URL = "https://hn.algolia.com/api/v1/search"
    ITEM_URL = "https://news.ycombinator.com/item?id={object_id}"
    FALLBACK_TITLE = "Hacker News opportunity"
    DEFAULT_QUERY = "Who is hiring"
    DEFAULT_LIMIT = 20
    MAX_LIMIT = 50
    DEFAULT_PRIORITY = 1

    def _fetch_opportunities(self, config: ConnectorConfig) -> List[Opportunity]:
        params = {
            "query": self._resolve_query(config),
            "tags": "story",
            "hitsPerPage": self._resolve_limit(config),
        }

        payload = self._make_request(self.API_URL, params=params)
        if not isinstance(payload, dict):
            raise ConnectorResponseError(
                f"Expected JSON object response, got {type(payload).__name__}"
            )

        hits = self._require_list(payload.get("hits", []), "hits")
        priority = self._resolve_priority(config)

        return self._map_items(hits, lambda hit: self._transform_hit(hit, priority))

    def _transform_hit(self, hit: Dict[str, Any], priority: int) -> Opportunity:
        """Map one hit.

        Self posts have no external URL and link to their item page instead;
        hits with neither fail validation and are skipped.
        """
        title = hit.get("title") or hit.get("story_title") or self.FALLBACK_TITLE

        url = hit.get("url")
        if not url and hit.get("objectID"):
            url = self.ITEM_URL.format(object_id=hit["objectID"])

        return Opportunity(
            source=self.SOURCE,
            title=title,
            url=url or "",
            description=self._highlighted_title(hit),
            priority=priority,
        )

    @staticmethod
    def _highlighted_title(hit: Dict[str, Any]) -> Optional[str]:
        highlight = hit.get("_highlightResult") or {}
        title = highlight.get("title") or {}
        return title.get("value")
