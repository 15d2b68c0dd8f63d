"""Tests for git output parsers."""

import pytest

from git_smart.parsing import is_benign_stash_pop_failure, parse_default_branch


class TestParseDefaultBranch:
    """Tests for extracting the HEAD branch of a remote."""

    def test_full_remote_show_output(self):
        output = (
            "* remote origin\n"
            "  Fetch URL: https://github.com/org/repo.git\n"
            "  Push  URL: https://github.com/org/repo.git\n"
            "  HEAD branch: master\n"
            "  Remote branches:\n"
            "    master tracked\n"
        )
        assert parse_default_branch(output) == "master"

    def test_branch_with_slash(self):
        assert parse_default_branch("HEAD branch: release/2.x") == "release/2.x"

    def test_marker_missing(self):
        assert parse_default_branch("* remote origin\n  Fetch URL: x") is None

    def test_empty_output(self):
        assert parse_default_branch("") is None

    def test_unknown_head(self):
        assert parse_default_branch("  HEAD branch: (unknown)") is None


class TestBenignStashPopFailure:
    """Tests for recognizing harmless stash-pop failures."""

    @pytest.mark.parametrize(
        "output",
        [
            "No stash found.",
            "error: No stash entries found.",
            "Did not need to pop stash",
            "DID NOT NEED TO POP STASH",
            "no stash entries found",
        ],
    )
    def test_benign(self, output):
        assert is_benign_stash_pop_failure(output) is True

    def test_conflict_is_not_benign(self):
        output = (
            "error: Your local changes to the following files would be overwritten by merge:\n"
            "\ta.txt\n"
            "Please commit your changes or stash them before you merge.\n"
            "Aborting\n"
            "The stash entry is kept in case you need it again."
        )
        assert is_benign_stash_pop_failure(output) is False

    def test_custom_phrases(self):
        assert is_benign_stash_pop_failure("Kein Stash gefunden", ["kein stash"]) is True
        assert is_benign_stash_pop_failure("No stash found", ["kein stash"]) is False

    def test_blank_phrase_ignored(self):
        assert is_benign_stash_pop_failure("anything", [""]) is False
