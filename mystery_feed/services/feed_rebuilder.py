import logging
from typing import List, Optional, Tuple, Union

from mystery_feed.api.exceptions import TransformError
from mystery_feed.config import Settings
from mystery_feed.export.rss_writer import RssWriter
from mystery_feed.models.feed import (
    FeedChannel,
    RedactedChannel,
    RedactedEpisode,
    RedactedFeed,
    SourceEpisode,
    SourceFeed,
)
from mystery_feed.services.title_redactor import build_description, redact_title

logger = logging.getLogger(__name__)


def normalize_keywords(keywords: Optional[Union[str, List[str]]]) -> Optional[str]:
    """Joins list keywords with commas; scalar keywords are returned as-is."""
    if keywords is None:
        return None
    if isinstance(keywords, str):
        return keywords.strip() or None
    joined = ",".join(word.strip() for word in keywords if word and word.strip())
    return joined or None


class FeedRebuilder:
    """
    Builds the redacted feed from a parsed source feed.

    Titles are replaced, descriptions get the spoiler disclaimer, the channel is
    re-addressed to the published URL and everything else is copied through.
    """

    def __init__(self, published_url: str, ttl: int = 60, writer: Optional[RssWriter] = None):
        self.published_url = published_url
        self.ttl = ttl
        self.writer = writer or RssWriter()

    @classmethod
    def from_settings(cls, settings: Settings, writer: Optional[RssWriter] = None) -> "FeedRebuilder":
        return cls(published_url=settings.PUBLISHED_URL, ttl=settings.FEED_TTL_MINUTES, writer=writer)

    def rebuild(self, feed: SourceFeed) -> Tuple[RedactedFeed, str]:
        """
        Redacts the feed and serializes it.

        Args:
            feed: Parsed upstream feed. It is not modified.

        Returns:
            A tuple of (RedactedFeed, serialized RSS document).

        Raises:
            TransformError: An episode has no title.
        """
        channel = self._rebuild_channel(feed.channel)
        episodes = [self._rebuild_episode(episode, index) for index, episode in enumerate(feed.episodes)]
        redacted = RedactedFeed(channel=channel, episodes=episodes)
        document = self.writer.render(redacted)
        logger.info(f"Rebuilt feed '{channel.title}' with {len(episodes)} redacted episodes.")
        return redacted, document

    def _rebuild_channel(self, source: FeedChannel) -> RedactedChannel:
        data = source.model_dump()
        data["keywords"] = normalize_keywords(source.keywords)
        return RedactedChannel(
            **data,
            feed_url=self.published_url,
            site_url=self.published_url,
            ttl=self.ttl,
        )

    def _rebuild_episode(self, episode: SourceEpisode, index: int) -> RedactedEpisode:
        if episode.title is None:
            raise TransformError(f"Episode {index} (guid={episode.guid}) has no title")

        return RedactedEpisode(
            title=redact_title(episode.title, episode.pub_date),
            description=build_description(episode.content_snippet),
            pub_date=episode.pub_date,
            pub_date_raw=episode.pub_date_raw,
            link=episode.link,
            guid=episode.guid,
            enclosure=episode.enclosure.model_copy() if episode.enclosure else None,
            itunes=episode.itunes.model_copy(),
        )
