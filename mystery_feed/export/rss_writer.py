import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional

from mystery_feed.models.feed import RedactedChannel, RedactedEpisode, RedactedFeed

logger = logging.getLogger(__name__)

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
ATOM_NS = "http://www.w3.org/2005/Atom"

ET.register_namespace("itunes", ITUNES_NS)
ET.register_namespace("atom", ATOM_NS)


def _itunes(tag: str) -> str:
    return f"{{{ITUNES_NS}}}{tag}"


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def _rfc2822(value: datetime) -> str:
    # Naive datetimes are taken to be UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


class RssWriter:
    """
    Renders a RedactedFeed as an RSS 2.0 document with iTunes podcast tags.
    """

    def __init__(self, generator: str = "mystery-feed", indent: bool = True):
        self.generator = generator
        self.indent = indent

    def render(self, feed: RedactedFeed, build_date: Optional[datetime] = None) -> str:
        """
        Serializes the feed.

        Args:
            feed: The rebuilt feed.
            build_date: Value for <lastBuildDate>; defaults to now (UTC).

        Returns:
            The XML document as a string, including the XML declaration.
        """
        rss = ET.Element("rss", attrib={"version": "2.0"})
        channel = ET.SubElement(rss, "channel")
        self._write_channel(channel, feed.channel, build_date or datetime.now(timezone.utc))
        for episode in feed.episodes:
            self._write_item(ET.SubElement(channel, "item"), episode)

        tree = ET.ElementTree(rss)
        if self.indent:
            ET.indent(tree, space="  ")
        body = ET.tostring(rss, encoding="unicode")
        logger.debug(f"Rendered RSS document with {len(feed.episodes)} items ({len(body)} chars).")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body

    # --- Channel --- #

    def _write_channel(self, channel: ET.Element, meta: RedactedChannel, build_date: datetime) -> None:
        def _set(tag: str, value: Optional[str]) -> None:
            if value:
                ET.SubElement(channel, tag).text = value

        _set("title", meta.title)
        _set("description", meta.description)
        _set("link", meta.site_url)
        ET.SubElement(
            channel,
            f"{{{ATOM_NS}}}link",
            attrib={"href": meta.feed_url, "rel": "self", "type": "application/rss+xml"},
        )
        if meta.image_url:
            image = ET.SubElement(channel, "image")
            ET.SubElement(image, "url").text = meta.image_url
            if meta.title:
                ET.SubElement(image, "title").text = meta.title
            ET.SubElement(image, "link").text = meta.site_url
        _set("generator", self.generator)
        _set("lastBuildDate", _rfc2822(build_date))
        _set("copyright", meta.copyright)
        _set("language", meta.language)
        _set("pubDate", meta.pub_date)
        _set("ttl", str(meta.ttl))

        if meta.image_url:
            ET.SubElement(channel, _itunes("image"), attrib={"href": meta.image_url})
        if meta.explicit is not None:
            _set(_itunes("explicit"), _bool_text(meta.explicit))
        _set(_itunes("keywords"), meta.keywords)
        if meta.owner_name:
            owner = ET.SubElement(channel, _itunes("owner"))
            ET.SubElement(owner, _itunes("name")).text = meta.owner_name
        _set(_itunes("author"), meta.author)
        _set(_itunes("type"), meta.feed_type)
        _set(_itunes("summary"), meta.summary)

    # --- Items --- #

    def _write_item(self, item: ET.Element, episode: RedactedEpisode) -> None:
        def _set(tag: str, value: Optional[str]) -> Optional[ET.Element]:
            if not value:
                return None
            el = ET.SubElement(item, tag)
            el.text = value
            return el

        _set("title", episode.title)
        _set("description", episode.description)
        _set("link", episode.link)
        guid = _set("guid", episode.guid)
        if guid is not None:
            guid.set("isPermaLink", "true" if episode.guid.startswith(("http://", "https://")) else "false")

        if episode.pub_date_raw:
            _set("pubDate", episode.pub_date_raw)
        elif episode.pub_date is not None:
            _set("pubDate", _rfc2822(episode.pub_date))

        if episode.enclosure is not None:
            attrib = {"url": episode.enclosure.url}
            if episode.enclosure.length is not None:
                attrib["length"] = str(episode.enclosure.length)
            if episode.enclosure.type:
                attrib["type"] = episode.enclosure.type
            ET.SubElement(item, "enclosure", attrib=attrib)

        meta = episode.itunes
        _set(_itunes("duration"), meta.duration)
        if meta.explicit is not None:
            _set(_itunes("explicit"), _bool_text(meta.explicit))
        _set(_itunes("episodeType"), meta.episode_type)
        _set(_itunes("episode"), meta.episode)
        if meta.image_url:
            ET.SubElement(item, _itunes("image"), attrib={"href": meta.image_url})
