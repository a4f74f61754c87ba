"""Maps feedparser's loosely-typed dictionaries onto the explicit feed models."""
import logging
import re
from typing import Any, Dict, Optional

from mystery_feed.models.feed import Enclosure, EpisodeMetadata, FeedChannel, SourceEpisode, SourceFeed
from mystery_feed.utils.dates import parse_pub_date
from mystery_feed.utils.raw_rss import RawFeedFields, RawItemFields
from mystery_feed.utils.text import html_to_snippet

logger = logging.getLogger(__name__)

# feedparser only understands the legacy "yes"/"clean" explicit values; anything else becomes None
EXPLICIT_FLAG_PATTERN = re.compile(rb"(<itunes:explicit\s*>)\s*([A-Za-z]+)\s*(</itunes:explicit\s*>)")
EXPLICIT_VALUES = {
    b"true": b"yes",
    b"yes": b"yes",
    b"explicit": b"yes",
    b"false": b"clean",
    b"no": b"clean",
    b"clean": b"clean",
}


def normalize_explicit_flags(content: bytes) -> bytes:
    """Rewrites itunes:explicit values ("true", "False", ...) into the spelling feedparser maps to a bool."""
    def _replace(match):
        value = EXPLICIT_VALUES.get(match.group(2).lower())
        if value is None:
            return match.group(0)
        return match.group(1) + value + match.group(3)

    return EXPLICIT_FLAG_PATTERN.sub(_replace, content)


def _text(value: Any) -> Optional[str]:
    """Returns a stripped string, or None for missing/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _image_href(node: Dict[str, Any]) -> Optional[str]:
    image = node.get('image') or {}
    return _text(image.get('href') or image.get('url'))


def _parse_length(value: Any) -> Optional[int]:
    try:
        length = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return length if length >= 0 else None


def map_feedparser_channel(feed: Dict[str, Any], raw: Optional[RawFeedFields] = None) -> FeedChannel:
    """
    Builds channel metadata from feedparser's `parsed.feed`.

    With `raw`, description and keywords come from the document's own elements.
    Without it (Atom and other non RSS 2.0 feeds) the description is feedparser's
    subtitle and keywords are left unset, since feedparser mixes them with categories.
    """
    publisher = feed.get('publisher_detail') or {}
    if raw is not None:
        description = _text(raw.description)
        keywords = _text(raw.keywords)
    else:
        description = _text(feed.get('subtitle') or feed.get('description'))
        keywords = None
    return FeedChannel(
        title=_text(feed.get('title')),
        description=description,
        copyright=_text(feed.get('rights')),
        language=_text(feed.get('language')),
        pub_date=_text(feed.get('published') or feed.get('updated')),
        image_url=_image_href(feed),
        owner_name=_text(publisher.get('name') or feed.get('publisher')),
        author=_text(feed.get('author')),
        keywords=keywords,
        explicit=feed.get('itunes_explicit'),
        summary=_text(feed.get('summary')),
        feed_type=_text(feed.get('itunes_type')),
    )


def map_feedparser_enclosure(entry: Dict[str, Any]) -> Optional[Enclosure]:
    """Returns the first enclosure with a URL, or None when the item has no media."""
    for enclosure in entry.get('enclosures', []):
        url = _text(enclosure.get('href') or enclosure.get('url'))
        if not url:
            continue
        return Enclosure(
            url=url,
            type=_text(enclosure.get('type')),
            length=_parse_length(enclosure.get('length')),
        )
    return None


def map_feedparser_entry(entry: Dict[str, Any], raw: Optional[RawItemFields] = None) -> SourceEpisode:
    """
    Builds a SourceEpisode from one of feedparser's `parsed.entries`.

    The snippet is taken from the item's own <description> when `raw` is given;
    otherwise from feedparser's summary, then its first content block.
    """
    raw_date = _text(entry.get('published'))
    if raw is not None:
        html_description = raw.description
    else:
        html_description = entry.get('summary')
        if not html_description and entry.get('content'):
            html_description = entry['content'][0].get('value')

    return SourceEpisode(
        # Title is kept verbatim (quotes included); None means the item had no <title>
        title=entry.get('title'),
        content_snippet=html_to_snippet(html_description),
        pub_date=parse_pub_date(raw_date, entry.get('published_parsed')),
        pub_date_raw=raw_date,
        link=_text(entry.get('link')),
        guid=_text(entry.get('id')),
        enclosure=map_feedparser_enclosure(entry),
        itunes=EpisodeMetadata(
            duration=_text(entry.get('itunes_duration')),
            explicit=entry.get('itunes_explicit'),
            episode_type=_text(entry.get('itunes_episodetype')),
            episode=_text(entry.get('itunes_episode')),
            image_url=_image_href(entry),
        ),
    )


def map_feedparser_result(parsed: Dict[str, Any], raw: Optional[RawFeedFields] = None) -> SourceFeed:
    """Maps a whole feedparser result, keeping the entry order."""
    entries = parsed.get('entries', [])
    raw_items = [None] * len(entries)
    if raw is not None:
        if len(raw.items) == len(entries):
            raw_items = raw.items
        else:
            # Item descriptions cannot be paired up; fall back to feedparser's summaries
            logger.warning(f"Document has {len(raw.items)} <item> elements but feedparser found {len(entries)} entries.")

    episodes = [map_feedparser_entry(entry, raw_item) for entry, raw_item in zip(entries, raw_items)]
    logger.debug(f"Mapped {len(episodes)} entries from feedparser result.")
    return SourceFeed(channel=map_feedparser_channel(parsed.get('feed', {}), raw), episodes=episodes)
