"""GitHub issue search connector."""

from typing import Any, Dict, List

from prospector.config.models import ConnectorConfig
from prospector.domain.models import Opportunity, OpportunitySource

from .base import BaseConnector
from .exceptions import ConnectorResponseError


class GitHubIssuesConnector(BaseConnector):
    """Connector for the GitHub issue search API.

    API Details:
        Endpoint: https://api.github.com/search/issues
        Method: GET
        Authentication: Optional bearer token (raises the rate limit)
        Response: JSON object with an 'items' array of issues
    """

    CONNECTOR_NAME = "github"
    SOURCE = OpportunitySource.GITHUB
    API_URL = "https://api.github.com/search/issues"
    DEFAULT_QUERY = "label:help-wanted"
    DEFAULT_LIMIT = 10
    MAX_LIMIT = 50
    DEFAULT_PRIORITY = 1

    def _fetch_opportunities(self, config: ConnectorConfig) -> List[Opportunity]:
        headers = {"Accept": "application/vnd.github+json"}
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"

        params = {
            "q": self._resolve_query(config),
            "per_page": self._resolve_limit(config),
        }

        payload = self._make_request(self.API_URL, params=params, headers=headers)
        if not isinstance(payload, dict):
            raise ConnectorResponseError(
                f"Expected JSON object response, got {type(payload).__name__}"
            )

        items = self._require_list(payload.get("items", []), "items")
        priority = self._resolve_priority(config)

        return self._map_items(items, lambda issue: self._transform_issue(issue, priority))

    def _transform_issue(self, issue: Dict[str, Any], priority: int) -> Opportunity:
        """Map one search hit; the issue body becomes the description preview."""
        return Opportunity(
            source=self.SOURCE,
            title=issue["title"],
            url=issue["html_url"],
            description=issue.get("body"),
            priority=priority,
        )
