"""Generic syndication feed connector (RSS/Atom)."""

import io
from typing import Any, List, Optional

import feedparser

from prospector.config.models import ConnectorConfig
from prospector.domain.models import Opportunity, OpportunitySource
from prospector.logging import get_logger

from .base import BaseConnector

logger = get_logger(__name__, component="connector")


class FeedConnector(BaseConnector):
    """Connector for an arbitrary RSS or Atom feed.

    Parsing is tolerant: feedparser recovers what it can from broken markup,
    entries without a usable title or link are skipped, and a document with no
    recognizable entries simply yields nothing. At most MAX_LIMIT entries are
    taken, however long the feed is.
    """

    CONNECTOR_NAME = "feed"
    SOURCE = OpportunitySource.FEED
    DEFAULT_FEED_URL = "https://www.producthunt.com/feed"
    DEFAULT_LIMIT = 10
    MAX_LIMIT = 10
    DEFAULT_PRIORITY = 1

    def _fetch_opportunities(self, config: ConnectorConfig) -> List[Opportunity]:
        feed_url = config.feed_url or self.DEFAULT_FEED_URL
        response = self._send(feed_url)
        return self.parse_feed(response.content, config)

    def parse_feed(self, document: bytes, config: ConnectorConfig) -> List[Opportunity]:
        """Extract up to the configured number of entries from a feed document.

        Args:
            document: Raw feed bytes as served
            config: Connector settings (limit, priority)

        Returns:
            Opportunities for the first matching entries, in document order
        """
        # A file-like object keeps feedparser from treating the payload as a URL or path
        parsed = feedparser.parse(io.BytesIO(document))

        if parsed.get("bozo"):
            logger.debug(
                "Feed is not well-formed, using recovered entries",
                extra={
                    "event": "connector.feed.malformed",
                    "connector": self.CONNECTOR_NAME,
                    "error": str(parsed.get("bozo_exception")),
                    "recovered_entries": len(parsed.entries),
                },
            )

        limit = self._resolve_limit(config)
        priority = self._resolve_priority(config)

        opportunities: List[Opportunity] = []
        for index, entry in enumerate(parsed.entries):
            if len(opportunities) >= limit:
                break

            title = entry.get("title")
            link = self._alternate_link(entry)
            if not isinstance(title, str) or not title.strip() or not link:
                logger.debug(
                    "Skipping feed entry without title or link",
                    extra={
                        "event": "connector.item.skipped",
                        "connector": self.CONNECTOR_NAME,
                        "index": index,
                    },
                )
                continue

            opportunities.append(
                Opportunity(source=self.SOURCE, title=title, url=link, priority=priority)
            )

        return opportunities

    @staticmethod
    def _alternate_link(entry: Any) -> Optional[str]:
        """Href of the entry's own <link>, if any.

        Only explicit links count; feedparser's fallback of copying a permalink
        <guid> into ``entry.link`` is ignored.
        """
        for link in entry.get("links") or []:
            href = link.get("href")
            if link.get("rel", "alternate") == "alternate" and isinstance(href, str) and href.strip():
                return href.strip()
        return None
