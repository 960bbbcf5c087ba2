"""
Name: Markdown → HTML normalization tests
"""

import pytest

from longdoc.infrastructure.services.html_format import markdown_to_html

pytestmark = pytest.mark.unit


def test_headings_shift_one_level():
    text = "# One\n## Two\n### Three"

    assert markdown_to_html(text) == "<h2>One</h2>\n<h3>Two</h3>\n<h4>Three</h4>"


def test_each_bullet_run_becomes_its_own_list():
    text = "Intro\n- a\n- b\nMiddle\n- c"

    assert markdown_to_html(text) == (
        "Intro\n<ul>\n  <li>a</li>\n  <li>b</li>\n</ul>\nMiddle\n<ul>\n  <li>c</li>\n</ul>"
    )


def test_existing_html_list_untouched():
    text = "<ul><li>x</li></ul>\n- y"

    assert markdown_to_html(text) == text


def test_plain_text_untouched():
    assert markdown_to_html("No markdown here.") == "No markdown here."
    assert markdown_to_html("") == ""
