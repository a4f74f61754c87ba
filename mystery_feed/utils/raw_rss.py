"""
Reads the few RSS 2.0 elements that feedparser merges with look-alikes.

feedparser files the channel <description> and <itunes:subtitle> under one key,
folds <itunes:category> into the same tag list as <itunes:keywords>, and swaps
an item's <description> into `content` when <itunes:summary> precedes it. These
values are taken from the document itself instead.
"""
import logging
import xml.etree.ElementTree as ET  # nosec B405
from dataclasses import dataclass, field
from typing import List, Optional

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring as safe_fromstring

logger = logging.getLogger(__name__)

ITUNES_KEYWORDS = "{http://www.itunes.com/dtds/podcast-1.0.dtd}keywords"


@dataclass
class RawItemFields:
    description: Optional[str] = None # Inner text of <description>, None when the item has none


@dataclass
class RawFeedFields:
    description: Optional[str] = None
    keywords: Optional[str] = None
    items: List[RawItemFields] = field(default_factory=list)


def _element_text(parent: ET.Element, tag: str) -> Optional[str]:
    elem = parent.find(tag)
    if elem is None:
        return None
    return elem.text or ""


def extract_raw_fields(content: bytes) -> Optional[RawFeedFields]:
    """
    Pulls channel description, channel keywords and item descriptions from an RSS 2.0 document.

    Returns:
        RawFeedFields, or None when the document is not RSS 2.0 or cannot be read
        as plain XML (callers then rely on feedparser's values alone).
    """
    try:
        root = safe_fromstring(content)
    except (ET.ParseError, DefusedXmlException) as e:
        logger.warning(f"Could not read raw RSS elements, using feedparser values only: {e}")
        return None

    channel = root.find("channel") if root.tag == "rss" else None
    if channel is None:
        logger.debug(f"Root element <{root.tag}> is not an RSS 2.0 channel; no raw fields extracted.")
        return None

    return RawFeedFields(
        description=_element_text(channel, "description"),
        keywords=_element_text(channel, ITUNES_KEYWORDS),
        items=[RawItemFields(description=_element_text(item, "description")) for item in channel.findall("item")],
    )
