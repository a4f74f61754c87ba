import re
from html.parser import HTMLParser
from typing import List, Optional

# Tags that start a new line of text in the snippet
BLOCK_TAGS = {
    "br", "p", "div", "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "blockquote", "section", "table", "tr",
}

_BLANK_LINES = re.compile(r"\n\s*\n+")


class _SnippetExtractor(HTMLParser):
    """Collects the text of an HTML fragment, turning block tags into line breaks."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: List[str] = []

    def handle_starttag(self, tag, attrs):
        if tag in BLOCK_TAGS:
            self.parts.append("\n")

    def handle_endtag(self, tag):
        if tag in BLOCK_TAGS:
            self.parts.append("\n")

    def handle_startendtag(self, tag, attrs):
        # <br/> is one break, not an open plus a close
        if tag in BLOCK_TAGS:
            self.parts.append("\n")

    def handle_data(self, data):
        self.parts.append(data)

    def get_text(self) -> str:
        return "".join(self.parts)


def html_to_snippet(html_text: Optional[str]) -> str:
    """
    Converts an item's HTML description into the plain-text snippet shown in podcast apps.

    Tags are dropped, character references decoded, block elements become line breaks and
    runs of blank lines collapse to one. Never raises; empty input gives "".
    """
    if not html_text:
        return ""
    extractor = _SnippetExtractor()
    extractor.feed(html_text)
    extractor.close()
    text = extractor.get_text()
    lines = [line.strip() for line in text.splitlines()]
    return _BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()
