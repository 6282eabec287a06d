from __future__ import annotations

from html import escape

from bs4 import BeautifulSoup

from webcapture.text import (
    clean_text,
    extract_plain_text,
    page_title,
    remove_noise,
    render_text_outline,
)


def test_session_logout_anchor_is_removed() -> None:
    html = (
        '<html><body><a onclick="ChkRet_nosess();">Logout</a>'
        "<p>Welcome</p></body></html>"
    )

    text = extract_plain_text(html)

    assert text == "Welcome"
    assert "Logout" not in text


def test_scripts_and_styles_never_reach_text() -> None:
    html = (
        "<html><head><style>.x{color:blue}</style></head><body>"
        "<p>Hello</p><script>var secret = 1;</script>"
        "<style>p{margin:0}</style></body></html>"
    )

    text = extract_plain_text(html)

    assert text == "Hello"
    for fragment in ("script", "style", "secret", "margin", "color"):
        assert fragment not in text


def test_remove_noise_targets_known_artifacts() -> None:
    soup = BeautifulSoup(
        "<html><head><meta charset='utf-8'></head><body>"
        '<input class="btnCommon wide" value="Go">'
        '<input class="other" value="Stay">'
        '<img src="/egp2procmainWeb/images/pagefooter.gif">'
        '<img src="/other.gif">'
        '<a onclick="other();">Keep</a>'
        "</body></html>",
        "html.parser",
    )

    removed = remove_noise(soup)

    assert removed == 3
    assert [tag["class"] for tag in soup.find_all("input")] == [["other"]]
    assert [tag["src"] for tag in soup.find_all("img")] == ["/other.gif"]
    assert soup.find("a").get_text() == "Keep"


def test_clean_text_trims_and_drops_blank_lines() -> None:
    raw = "  \n\tfirst line\t \n\n   second\n \n third  "

    assert clean_text(raw) == "first line\nsecond\nthird"
    assert clean_text("col1\tcol2") == "col1col2"


def test_body_text_keeps_inner_spacing_and_skips_comments() -> None:
    html = (
        "<html><head><title>Title</title></head><body>\n"
        "  <h1>Heading</h1>\n"
        "  <p>Para  one</p>\n"
        "  <!-- hidden comment -->\n"
        "</body></html>"
    )

    assert extract_plain_text(html) == "Heading\nPara  one"


def test_text_without_body_uses_document_minus_head() -> None:
    assert extract_plain_text("<div>hi</div>") == "hi"
    assert extract_plain_text("<head><title>T</title></head><div>hi</div>") == "hi"


def test_text_extraction_is_idempotent() -> None:
    html = "<html><body><p>Fish &amp; Chips</p><p>1 &lt; 2</p></body></html>"

    text = extract_plain_text(html)
    again = extract_plain_text(f"<html><body>{escape(text)}</body></html>")

    assert text == "Fish & Chips\n1 < 2"
    assert again == text


def test_page_title() -> None:
    assert page_title("<html><head><title>  My Page </title></head></html>") == "My Page"
    assert page_title("<p>untitled</p>") is None


def test_outline_walks_outermost_structural_elements() -> None:
    html = (
        "<html><body><div><h1>Title</h1><p>Body text</p></div>"
        "<script>track()</script></body></html>"
    )

    outline = render_text_outline(html)

    assert outline.count('class="extracted-text ') == 3
    assert 'class="extracted-text div-text"' in outline
    assert 'class="extracted-text h1-text"' in outline
    assert 'class="extracted-text p-text"' in outline
    assert "track()" not in outline


def test_outline_escapes_text() -> None:
    outline = render_text_outline("<body><p>a &lt;b&gt;</p></body>")

    assert "a &lt;b&gt;" in outline
    assert "<b>" not in outline


def test_outline_falls_back_to_body() -> None:
    outline = render_text_outline("<body><span>alone</span></body>")

    assert 'class="extracted-text body-text"' in outline
    assert 'class="extracted-text span-text"' in outline


def test_text_without_body_skips_head_only_elements() -> None:
    assert extract_plain_text("<title>T</title><div>hi</div>") == "hi"


def test_text_after_closing_body_is_kept() -> None:
    html = "<html><body><p>a</p></body>\n<p>b</p></html>"

    assert extract_plain_text(html) == "a\nb"
