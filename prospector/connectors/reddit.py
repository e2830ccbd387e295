"""Reddit "new posts" listing connector."""

from typing import Any, Dict, List
from urllib.parse import quote

from prospector.config.models import ConnectorConfig
from prospector.domain.models import Opportunity, OpportunitySource

from .base import BaseConnector
from .exceptions import ConnectorResponseError


class RedditConnector(BaseConnector):
    """Connector for a subreddit's newest posts.

    The configured ``query`` names the subreddit. Reddit rejects requests
    without a descriptive User-Agent, which the base session always sends.

    API Details:
        Endpoint: https://www.reddit.com/r/{subreddit}/new.json
        Method: GET
        Authentication: None (public listing)
        Response: Listing object, posts under data.children[].data
    """

    CONNECTOR_NAME = "reddit"
    SOURCE = OpportunitySource.REDDIT
    BASE_URL = "https://www.reddit.com"
    DEFAULT_QUERY = "Entrepreneur"
    DEFAULT_LIMIT = 10
    MAX_LIMIT = 50
    DEFAULT_PRIORITY = 0

    def _fetch_opportunities(self, config: ConnectorConfig) -> List[Opportunity]:
        subreddit = self._resolve_query(config)
        url = f"{self.BASE_URL}/r/{quote(subreddit, safe='')}/new.json"

        payload = self._make_request(url, params={"limit": self._resolve_limit(config)})
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            raise ConnectorResponseError("Expected a Listing object with a 'data' field")

        children = self._require_list(payload["data"].get("children", []), "data.children")
        priority = self._resolve_priority(config)

        return self._map_items(children, lambda child: self._transform_post(child, priority))

    def _transform_post(self, child: Dict[str, Any], priority: int) -> Opportunity:
        """Map one listing child; permalinks are site-relative."""
        post = child["data"]
        permalink = post["permalink"]
        if not isinstance(permalink, str) or not permalink.startswith("/"):
            raise ValueError(f"Invalid permalink: {permalink!r}")

        return Opportunity(
            source=self.SOURCE,
            title=post["title"],
            url=f"{self.BASE_URL}{permalink}",
            description=post.get("selftext"),
            priority=priority,
        )
