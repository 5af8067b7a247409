"""
Unit tests for transcript rendering and fuzzy sanity checks.
"""
from flows import DiarizedSegment
from transcript_checks import (
    check_segment_coverage,
    join_transcript_pieces,
    locate_excerpt,
    locate_excerpts,
    normalize_text,
    render_export_text,
    render_search_text,
    unmatched_excerpts,
)

SEGMENTS = [
    DiarizedSegment(speaker="Judge", text="Is the prosecution ready?"),
    DiarizedSegment(speaker="Prosecutor", text="We are ready, my lord."),
]


class TestRendering:

    def test_render_search_text(self):
        assert render_search_text(SEGMENTS) == (
            "Judge: Is the prosecution ready?\nProsecutor: We are ready, my lord."
        )

    def test_render_export_text(self):
        assert render_export_text(SEGMENTS) == (
            "Judge:\nIs the prosecution ready?\n\nProsecutor:\nWe are ready, my lord."
        )

    def test_render_empty(self):
        assert render_search_text([]) == ""
        assert render_export_text([]) == ""

    def test_normalize_text(self):
        assert normalize_text("  All\n\nRISE\t please ") == "all rise please"

    def test_join_transcript_pieces(self):
        assert join_transcript_pieces(["one", None, "", "two"]) == "one two "


class TestCoverage:

    def test_full_coverage(self):
        raw = "Is the prosecution ready?  We are ready, my lord."
        report = check_segment_coverage(raw, SEGMENTS)
        assert report.score == 100.0
        assert report.missing_words == 0

    def test_partial_coverage(self):
        raw = "Is the prosecution ready? We are ready, my lord. Call your first witness then."
        report = check_segment_coverage(raw, SEGMENTS)
        assert report.score < 100.0
        assert report.missing_words == 5

    def test_empty_inputs(self):
        assert check_segment_coverage("", []).score == 100.0
        assert check_segment_coverage("words", []).score == 0.0


class TestLocateExcerpts:

    TRANSCRIPT = "Judge: The matter is adjourned to the 5th of July for continuation of trial."

    def test_exact_match_is_case_insensitive(self):
        match = locate_excerpt(self.TRANSCRIPT, "ADJOURNED to the 5th")
        assert match.found
        assert match.score == 100.0
        assert self.TRANSCRIPT[match.start:match.end].lower() == "adjourned to the 5th"

    def test_fuzzy_match(self):
        match = locate_excerpt(self.TRANSCRIPT, "adjourned to the fifth of July")
        assert match.found
        assert match.score >= 80.0

    def test_no_match(self):
        match = locate_excerpt(self.TRANSCRIPT, "the defendant pleaded guilty to fraud")
        assert not match.found

    def test_blank_excerpt(self):
        assert not locate_excerpt(self.TRANSCRIPT, "  ").found

    def test_unmatched_excerpts(self):
        matches = locate_excerpts(self.TRANSCRIPT, ["continuation of trial", "bail is revoked forthwith"])
        assert unmatched_excerpts(matches) == ["bail is revoked forthwith"]
