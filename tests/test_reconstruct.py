from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from webcapture.models import CapturedPage
from webcapture.reconstruct import (
    INJECTED_STYLESHEET,
    NOTICE_BANNER,
    REVEAL_SCRIPT,
    reconstruct,
    render_document,
)
from webcapture.text import extract_plain_text


def test_relative_image_is_replaced_and_head_style_kept() -> None:
    html = (
        "<html><head><style>body{color:red}</style></head>"
        '<body><img src="/x.png" width="50" height="40"></body></html>'
    )

    document = render_document(html, [])

    assert (
        'src="https://placehold.co/50x40/f0f0f0/333333'
        '?text=Image%3A%2B50x40%2B(%2Fx.png)"'
    ) in document
    assert 'data-original-src="/x.png"' in document
    assert "<style>body{color:red}</style>" in document
    assert document.index("body{color:red}") < document.index("</head>")


def test_document_layout_order() -> None:
    document = render_document("<p>x</p>", ["a{}", "b{}"])

    assert document.startswith("<!DOCTYPE html>\n<html>\n<head>\n")
    assert (
        document.index(INJECTED_STYLESHEET)
        < document.index("<style>a{}</style>")
        < document.index("<style>b{}</style>")
        < document.index("</head>")
        < document.index(NOTICE_BANNER)
        < document.index("<p>x</p>")
        < document.index(REVEAL_SCRIPT)
        < document.index("</body>")
    )
    assert document.endswith("</html>\n")


def test_render_is_deterministic() -> None:
    html = '<html><body><img src="pic.png"><img></body></html>'

    assert render_document(html, ["p{}"]) == render_document(html, ["p{}"])


def test_missing_body_wraps_whole_input() -> None:
    document = render_document("<div>hi</div>")

    parsed = BeautifulSoup(document, "html.parser")
    assert parsed.body is not None
    assert parsed.body.find("div", string="hi") is not None
    assert document.index(NOTICE_BANNER) < document.index("<div>hi</div>")


def test_missing_head_leaves_head_region_empty() -> None:
    document = render_document("<body><p>x</p></body>")

    assert "</style>\n\n</head>" in document
    assert "<p>x</p>" in document


def test_tag_names_are_case_insensitive() -> None:
    html = '<HTML><HEAD><TITLE>T</TITLE></HEAD><BODY><IMG SRC="/y.png"></BODY></HTML>'

    document = render_document(html)

    assert "<title>T</title>" in document
    assert 'data-original-src="/y.png"' in document


@pytest.mark.parametrize("html", ["", "<", "</html>", "<body><img", "<head>"])
def test_malformed_input_never_raises(html: str) -> None:
    document = render_document(html)

    assert document.startswith("<!DOCTYPE html>")
    assert REVEAL_SCRIPT in document


def test_reveal_script_targets_replaced_images() -> None:
    assert "img[data-original-src]" in REVEAL_SCRIPT
    assert "alert(" in REVEAL_SCRIPT


def test_reconstruct_combines_both_views() -> None:
    html = "<html><body><p>Hello</p><img src='a.png'></body></html>"
    captured = CapturedPage(html=html, styles=("p{}",))

    page = reconstruct(captured)

    assert page.rendered_document == render_document(html, ("p{}",))
    assert page.plain_text == extract_plain_text(html) == "Hello"


def test_unclosed_head_does_not_duplicate_body() -> None:
    html = "<html><head><title>T</title><body><p>Hi</p><img src='/a.png'></body></html>"

    document = render_document(html)

    assert document.count("<p>Hi</p>") == 1
    assert document.index("<title>T</title>") < document.index("</head>")
    assert document.index("<p>Hi</p>") > document.index(NOTICE_BANNER)
    assert ' src="/a.png"' not in document
    assert 'data-original-src="/a.png"' in document
