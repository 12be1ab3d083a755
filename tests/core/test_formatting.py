"""Tests for core/formatting.py text helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from gitoops.core.formatting import (
    BRANCH_NAME_MAX,
    format_path_list,
    format_timestamp,
    is_valid_sha,
    pluralize,
    sanitize_branch_name,
    short_sha,
    truncate_text,
)


class TestPluralize:
    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 commits"), (1, "1 commit"), (3, "3 commits")],
    )
    def test_counts(self, count: int, expected: str) -> None:
        assert pluralize(count, "commit") == expected

    def test_custom_plural(self) -> None:
        assert pluralize(2, "directory", "directories") == "2 directories"


class TestTruncateText:
    def test_short_text_unchanged(self) -> None:
        assert truncate_text("short", 10) == "short"

    def test_long_text_cut_with_suffix(self) -> None:
        result = truncate_text("a" * 100, 60)
        assert len(result) == 60
        assert result.endswith("...")


class TestSanitizeBranchName:
    """Commit subject to branch name component."""

    @pytest.mark.parametrize(
        ("subject", "expected"),
        [
            ("Fix: login bug!", "fix-login-bug"),
            ("Add OAuth2 support", "add-oauth2-support"),
            ("already-clean", "already-clean"),
            ("  --weird__chars--  ", "weird-chars"),
            ("***", ""),
        ],
    )
    def test_sanitizes(self, subject: str, expected: str) -> None:
        assert sanitize_branch_name(subject) == expected

    def test_truncates_without_trailing_dash(self) -> None:
        result = sanitize_branch_name("word " * 30)
        assert len(result) <= BRANCH_NAME_MAX
        assert not result.endswith("-")


class TestIsValidSha:
    @pytest.mark.parametrize("sha", ["abc1234", "ABCDEF0", "a" * 40])
    def test_valid(self, sha: str) -> None:
        assert is_valid_sha(sha)

    @pytest.mark.parametrize("sha", ["abc123", "a" * 41, "xyz1234", "HEAD~1", ""])
    def test_invalid(self, sha: str) -> None:
        assert not is_valid_sha(sha)


def test_short_sha() -> None:
    assert short_sha("0123456789abcdef") == "01234567"


class TestFormatTimestamp:
    def test_compact_utc_format(self) -> None:
        moment = datetime(2024, 3, 9, 14, 5, 7, tzinfo=UTC)
        assert format_timestamp(moment) == "20240309-140507"

    def test_converts_to_utc(self) -> None:
        moment = datetime(2024, 3, 9, 16, 5, 7, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "20240309-140507"


class TestFormatPathList:
    def test_all_shown_when_under_limit(self) -> None:
        assert format_path_list(["a", "b"]) == ["• a", "• b"]

    def test_collapses_tail(self) -> None:
        lines = format_path_list([f"f{i}" for i in range(8)], max_shown=5)
        assert len(lines) == 6
        assert lines[-1] == "... and 3 more"
