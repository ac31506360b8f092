"""Tests for content_service.storage.naming module.

Covers:
    - split_name: extension handling, directories, dot files
    - fingerprinted_name: format, purity, literal logo scenario
    - escape_content_id: URL escaping of content IDs
"""

import pytest

from content_service.storage.naming import escape_content_id, fingerprinted_name, split_name

LOGO_DIGEST = "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"


class TestSplitName:
    """Tests for split_name()."""

    def test_simple_extension(self):
        assert split_name("logo.png") == ("logo", ".png")

    def test_only_last_extension_split(self):
        assert split_name("archive.tar.gz") == ("archive.tar", ".gz")

    def test_no_extension(self):
        assert split_name("README") == ("README", "")

    def test_dot_file_has_no_extension(self):
        assert split_name(".env") == (".env", "")

    def test_directories_dropped(self):
        assert split_name("static/img/logo.png") == ("logo", ".png")

    def test_windows_directories_dropped(self):
        assert split_name("C:\\Users\\me\\logo.png") == ("logo", ".png")

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            split_name("")

    def test_root_path_rejected(self):
        with pytest.raises(ValueError):
            split_name("/")


class TestFingerprintedName:
    """Tests for fingerprinted_name()."""

    def test_format(self):
        assert fingerprinted_name("logo.png", "abc123") == "logo-abc123.png"

    def test_literal_logo_scenario(self):
        first = fingerprinted_name("logo.png", LOGO_DIGEST)
        second = fingerprinted_name("logo2.png", LOGO_DIGEST)
        assert first == f"logo-{LOGO_DIGEST}.png"
        assert second == f"logo2-{LOGO_DIGEST}.png"
        assert first != second

    def test_deterministic(self):
        assert fingerprinted_name("a.css", "ff") == fingerprinted_name("a.css", "ff")

    def test_different_digests_differ(self):
        assert fingerprinted_name("a.css", "aa") != fingerprinted_name("a.css", "bb")

    def test_no_extension(self):
        assert fingerprinted_name("LICENSE", "abc") == "LICENSE-abc"

    def test_multi_dot(self):
        assert fingerprinted_name("bundle.min.js", "abc") == "bundle.min-abc.js"

    def test_empty_digest_rejected(self):
        with pytest.raises(ValueError):
            fingerprinted_name("logo.png", "")


class TestEscapeContentId:
    """Tests for escape_content_id()."""

    def test_plain_id_unchanged(self):
        assert escape_content_id("post-42") == "post-42"

    def test_slashes_escaped(self):
        assert escape_content_id("https://example.com/a/b") == "https%3A%2F%2Fexample.com%2Fa%2Fb"

    def test_unreserved_characters_kept(self):
        assert escape_content_id("a_b.c~d-e") == "a_b.c~d-e"

    def test_spaces_and_unicode(self):
        assert escape_content_id("caf\u00e9 menu") == "caf%C3%A9%20menu"

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            escape_content_id("")
