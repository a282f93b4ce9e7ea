import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from epub.sanitizer import is_external_link, sanitize_href, sanitize_id, valid_xhtml_ids

ALLOWED = re.compile(r"^[A-Za-z0-9_.-]*$")


class TestSanitizeId:
    """Property tests for id sanitization."""

    @given(st.text())
    def test_only_allowed_characters(self, value):
        assert ALLOWED.match(sanitize_id(value))

    @given(st.text())
    def test_idempotent(self, value):
        once = sanitize_id(value)
        assert sanitize_id(once) == once

    def test_allowed_ids_untouched(self):
        assert sanitize_id("Foo.Bar_baz-1") == "Foo.Bar_baz-1"

    def test_runs_collapse_to_single_token(self):
        """A run of disallowed characters becomes one "--"."""
        assert sanitize_id("run/2") == "run--2"
        assert sanitize_id("a  /b") == "a--b"
        assert sanitize_id("valid?/1") == "valid--1"
        assert sanitize_id("é") == "--"


class TestSanitizeHref:
    """Test cases for link fragment rewriting."""

    @pytest.mark.parametrize("link", [
        "http://example.com#frag",
        "https://example.com/a b#some bad id!",
        "ftp://host/file#x/y",
        "mailto://someone#a?b",
        "irc://irc.net/#elixir-lang",
        "HTTP://EXAMPLE.COM#A B",
    ])
    def test_external_links_unchanged(self, link):
        assert is_external_link(link)
        assert sanitize_href(link) == link

    def test_fragment_rewritten(self):
        assert sanitize_href("modules/Foo.html#some bad id!") == "modules/Foo.html#some--bad--id--"

    def test_fragment_only(self):
        assert sanitize_href("#run/2") == "#run--2"

    def test_no_fragment_unchanged(self):
        assert sanitize_href("Foo.html") == "Foo.html"
        assert sanitize_href("Foo.html?x=1") == "Foo.html?x=1"

    def test_query_preserved(self):
        assert sanitize_href("Foo.html?x=1#a/b") == "Foo.html?x=1#a--b"

    def test_scheme_without_slashes_is_not_external(self):
        assert sanitize_href("mailto:me@example.com#a b") == "mailto:me@example.com#a--b"

    @pytest.mark.parametrize("link, expected", [
        ("//[bad#a b", "//[bad#a--b"),
        ("Foo.html?#a b", "Foo.html?#a--b"),
        (" Foo.html#a b", " Foo.html#a--b"),
        ("Foo.html#a#b", "Foo.html#a--b"),
    ])
    def test_only_fragment_changes(self, link, expected):
        """Text before the first "#" is kept byte for byte, even when it is not a valid URL."""
        assert sanitize_href(link) == expected

    def test_empty_fragment_unchanged(self):
        assert sanitize_href("Foo.html#") == "Foo.html#"

    @given(st.text(alphabet=st.characters(exclude_characters="#"), min_size=1), st.text())
    def test_target_preserved(self, target, fragment):
        assert sanitize_href(f"{target}#{fragment}").startswith(f"{target}#")


class TestValidXhtmlIds:
    """Test cases for whole-document sanitization."""

    def test_rewrites_ids_and_links(self):
        content = '<a href="#run/2">run/2</a><div id="run/2"></div>'
        assert valid_xhtml_ids(content) == '<a href="#run--2">run/2</a><div id="run--2"></div>'

    def test_external_link_byte_for_byte(self):
        content = '<a href="http://example.com#frag">x</a>'
        assert valid_xhtml_ids(content) == content

    def test_markup_outside_attributes_untouched(self):
        content = '<p class="a b">call run/2 or valid?/1: <code>id/1</code></p>'
        assert valid_xhtml_ids(content) == content

    def test_other_attributes_untouched(self):
        content = '<div data-id="a b" xml:id="c d" valid="e f" id="g h"></div>'
        assert valid_xhtml_ids(content) == '<div data-id="a b" xml:id="c d" valid="e f" id="g--h"></div>'

    def test_whitespace_after_href_normalized(self):
        assert valid_xhtml_ids('<a href= "#a b">') == '<a href="#a--b">'

    def test_idempotent(self):
        content = (
            '<a href="Foo.html#a b!">x</a><a href="https://x.org#q r">y</a>'
            '<h2 id="valid?/1">z</h2><a href="#">top</a>'
        )
        once = valid_xhtml_ids(content)
        assert valid_xhtml_ids(once) == once

    @given(st.text(alphabet=st.characters(exclude_characters='"<>'), min_size=1))
    def test_every_id_value_is_allowed(self, value):
        result = valid_xhtml_ids(f'<span id="{value}"></span><a href="#{value}"></a>')
        for found in re.findall(r'id="([^"]*)"', result):
            assert ALLOWED.match(found)
