"""Unit tests for placeholder-name detection."""

from __future__ import annotations

import pytest

from src.models.network import CollaboratorCandidate, Role
from src.services.fake_entry_filter import filter_candidates, is_fake


# ======================================================================
# is_fake
# ======================================================================


class TestIsFake:
    @pytest.mark.parametrize(
        "name",
        [
            "John Doe",
            "jane smith",
            "Producer X",
            "Songwriter Y",
            "Artist A",
            "Unknown",
            "Unknown Producer",
            "Various Artists",
            "TBD",
            "n/a",
            "Sample Name",
            "Producer 1",
            "songwriter 22",
            "Artist Q",
            "producer z",
            "X",
            "ab",
            "",
            "   ",
        ],
    )
    def test_placeholders_are_fake(self, name: str) -> None:
        assert is_fake(name) is True

    @pytest.mark.parametrize(
        "name",
        [
            "Max Martin",
            "Jack Antonoff",
            "FINNEAS",
            "Ada",
            "Boi-1da",
            'Noah "40" Shebib',
        ],
    )
    def test_real_names_pass(self, name: str) -> None:
        assert is_fake(name) is False

    def test_deterministic(self) -> None:
        assert is_fake("Artist B") == is_fake("Artist B")

    def test_surrounding_whitespace_ignored(self) -> None:
        assert is_fake("  Producer X  ") is True
        assert is_fake("  Max Martin ") is False

    def test_substring_hit_drops_real_looking_name(self) -> None:
        # Blunt substring matching: accepted false positive.
        assert is_fake("Various Cruelties") is True


# ======================================================================
# filter_candidates
# ======================================================================


def _candidate(name: str, top: list[str] | None = None) -> CollaboratorCandidate:
    return CollaboratorCandidate(
        name=name,
        role=Role.PRODUCER,
        top_collaborator_names=list(top or []),
    )


class TestFilterCandidates:
    def test_drops_fake_candidates_preserving_order(self) -> None:
        result = filter_candidates(
            [_candidate("Max Martin"), _candidate("Producer X"), _candidate("Shellback")]
        )
        assert [c.name for c in result] == ["Max Martin", "Shellback"]

    def test_scrubs_fake_top_collaborators(self) -> None:
        result = filter_candidates([_candidate("Max Martin", ["Katy Perry", "Artist A", "Pink"])])
        assert result[0].top_collaborator_names == ["Katy Perry", "Pink"]

    def test_untouched_candidate_is_same_object(self) -> None:
        original = _candidate("Max Martin", ["Katy Perry"])
        assert filter_candidates([original])[0] is original

    def test_empty_input(self) -> None:
        assert filter_candidates([]) == []

    def test_all_fake(self) -> None:
        assert filter_candidates([_candidate("John Doe"), _candidate("Unknown")]) == []
