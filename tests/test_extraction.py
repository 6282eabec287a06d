from __future__ import annotations

import logging

from webcapture.extraction import select_fields

HTML = (
    "<html><body><h1>Headline</h1>"
    "<p>First</p><p>Second</p></body></html>"
)


def test_missing_selector_yields_none_for_that_field_only() -> None:
    result = select_fields(HTML, {"a": "h1", "b": "#missing", "c": "p"})

    assert result == {"a": "Headline", "b": None, "c": "First"}
    assert list(result) == ["a", "b", "c"]


def test_invalid_selector_is_logged_and_batch_continues(caplog) -> None:
    caplog.set_level(logging.WARNING)

    result = select_fields(HTML, {"bad": "p[", "good": "h1"})

    assert result == {"bad": None, "good": "Headline"}
    assert "Error extracting bad" in caplog.text


def test_text_content_is_not_trimmed() -> None:
    result = select_fields("<p> spaced <b>out</b> </p>", {"p": "p"})

    assert result == {"p": " spaced out "}
