from mystery_feed.utils.text import html_to_snippet


def test_plain_text_is_unchanged():
    assert html_to_snippet("Howie stops by.") == "Howie stops by."


def test_tags_are_removed_and_entities_decoded():
    assert html_to_snippet("<b>Ted</b> &amp; <i>Mary</i>") == "Ted & Mary"


def test_block_tags_become_line_breaks():
    html = "<p>First paragraph.</p><p>Second paragraph.</p>"
    assert html_to_snippet(html) == "First paragraph.\n\nSecond paragraph."


def test_br_starts_new_line():
    assert html_to_snippet("Line one<br/>Line two") == "Line one\nLine two"


def test_empty_input():
    assert html_to_snippet(None) == ""
    assert html_to_snippet("") == ""
    assert html_to_snippet("<p></p>") == ""
