"""
Rule-based redaction of episode titles.

Every title is mapped onto one of four templates, so no part of the original
title other than a live-show location ever reaches the output. Rules overlap
(a three-word title may contain "&", a live show title may have five words),
which is why TITLE_RULES is evaluated strictly in order and the first match
wins:

    1. live_event   "<anything> LIVE in <location>"  -> Mystery Guest LIVE in <location>
    2. two_guests   "<w1> <w2> & <w3> <w4>"          -> TWO Mystery Guests
    3. short_title  one to three words               -> Mystery Guest
    4. default      anything else                    -> Something Special

The publish date is appended as " / Jan 5, 2024".
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from mystery_feed.utils.dates import format_episode_date

logger = logging.getLogger(__name__)

DESCRIPTION_DISCLAIMER = (
    "View the description to see who the mystery guest is. "
    "But if you don't want to know, don't look here..."
)

# Straight and curly double quotes
QUOTE_CHARACTERS = ('"', "“", "”")

LIVE_EVENT_PATTERN = re.compile(r"(.+) LIVE in (.+)", re.IGNORECASE)


@dataclass(frozen=True)
class TitleRule:
    """A predicate over the normalized title paired with the template it produces."""
    name: str
    match: Callable[[str], Optional[Dict[str, str]]] # Template fields on a match, None otherwise
    template: str

    def render(self, fields: Dict[str, str]) -> str:
        return self.template.format(**fields)


def _words(title: str):
    # Single-space split on purpose: "a  b" has an empty token and counts as three words
    return title.split(" ")


def _match_live_event(title: str) -> Optional[Dict[str, str]]:
    match = LIVE_EVENT_PATTERN.search(title)
    if not match:
        return None
    return {"location": match.group(2)}


def _match_two_guests(title: str) -> Optional[Dict[str, str]]:
    words = _words(title)
    if len(words) != 5 or words[2] != "&":
        return None
    if not all((words[0], words[1], words[3], words[4])):
        return None
    return {}


def _match_short_title(title: str) -> Optional[Dict[str, str]]:
    if 1 <= len(_words(title)) <= 3:
        return {}
    return None


def _match_anything(title: str) -> Optional[Dict[str, str]]:
    return {}


TITLE_RULES = (
    TitleRule("live_event", _match_live_event, "Mystery Guest LIVE in {location}"),
    TitleRule("two_guests", _match_two_guests, "TWO Mystery Guests"),
    TitleRule("short_title", _match_short_title, "Mystery Guest"),
    TitleRule("default", _match_anything, "Something Special"),
)


def strip_wrapping_quotes(title: str) -> str:
    """Removes one leading and one trailing quotation mark, if present."""
    if title[:1] in QUOTE_CHARACTERS:
        title = title[1:]
    if title[-1:] in QUOTE_CHARACTERS:
        title = title[:-1]
    return title


def classify_title(normalized_title: str):
    """Returns the first rule matching the title, together with its template fields."""
    for rule in TITLE_RULES:
        fields = rule.match(normalized_title)
        if fields is not None:
            return rule, fields
    # Unreachable while the default rule closes the table
    raise LookupError(f"No title rule matched '{normalized_title}'")


def redact_title(raw_title: str, pub_date: Optional[datetime]) -> str:
    """
    Produces the redacted title for an episode.

    Pure function of the title text and the publish date. When the date is
    missing the " / <date>" suffix is left off.
    """
    normalized = strip_wrapping_quotes(raw_title)
    rule, fields = classify_title(normalized)
    redacted = rule.render(fields)
    logger.debug(f"Title matched rule '{rule.name}'")

    date_label = format_episode_date(pub_date)
    if date_label is None:
        logger.warning(f"Episode has no usable publish date; title '{redacted}' is published without one.")
        return redacted
    return f"{redacted} / {date_label}"


def build_description(content_snippet: Optional[str]) -> str:
    """Puts the spoiler disclaimer in front of the original description text."""
    return f"{DESCRIPTION_DISCLAIMER}\n\n{content_snippet or ''}"
