"""
Transcript rendering and sanity checks for model output.
"""
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from rapidfuzz import fuzz


@dataclass
class CoverageReport:
    """How faithfully diarized segments reproduce the raw transcript."""
    score: float
    raw_words: int
    segment_words: int

    @property
    def missing_words(self) -> int:
        return max(0, self.raw_words - self.segment_words)


@dataclass
class ExcerptMatch:
    """Where a search excerpt was found in the transcript."""
    excerpt: str
    score: float
    start: int
    end: int

    @property
    def found(self) -> bool:
        return self.start >= 0


def normalize_text(text: str) -> str:
    """Collapse whitespace and lowercase for fuzzy comparison."""
    return re.sub(r'\s+', ' ', text).strip().lower()


def render_search_text(segments: Sequence[Any]) -> str:
    """Render diarized segments as 'Speaker: text' lines."""
    return '\n'.join(f"{s.speaker}: {s.text}" for s in segments)


def render_export_text(segments: Sequence[Any]) -> str:
    """Render diarized segments as speaker-headed blocks separated by blank lines."""
    return '\n\n'.join(f"{s.speaker}:\n{s.text}" for s in segments)


def check_segment_coverage(
    raw_transcript: str,
    segments: Sequence[Any],
) -> CoverageReport:
    """
    Score how much of the raw transcript the diarized segments reproduce.

    Compares whitespace-normalised text with a token-sort ratio.

    Args:
        raw_transcript: The transcript sent for diarization
        segments: Segments returned by the model

    Returns:
        CoverageReport with a 0-100 score
    """
    raw = normalize_text(raw_transcript)
    joined = normalize_text(' '.join(s.text for s in segments))

    if not raw and not joined:
        score = 100.0
    elif not raw or not joined:
        score = 0.0
    else:
        score = fuzz.token_sort_ratio(raw, joined)

    return CoverageReport(
        score=score,
        raw_words=len(raw.split()),
        segment_words=len(joined.split()),
    )


def locate_excerpt(
    transcript: str,
    excerpt: str,
    min_match_score: float = 80.0,
) -> ExcerptMatch:
    """
    Find an excerpt in the transcript, tolerating small wording differences.

    Returns:
        ExcerptMatch with start/end character offsets, or -1 if not found
    """
    if not excerpt.strip():
        return ExcerptMatch(excerpt, 0.0, -1, -1)

    exact = transcript.lower().find(excerpt.strip().lower())
    if exact >= 0:
        return ExcerptMatch(excerpt, 100.0, exact, exact + len(excerpt.strip()))

    alignment = fuzz.partial_ratio_alignment(
        excerpt.lower(), transcript.lower(), score_cutoff=min_match_score
    )
    if alignment is None:
        return ExcerptMatch(excerpt, 0.0, -1, -1)

    return ExcerptMatch(excerpt, alignment.score, alignment.dest_start, alignment.dest_end)


def locate_excerpts(
    transcript: str,
    excerpts: Sequence[str],
    min_match_score: float = 80.0,
) -> List[ExcerptMatch]:
    """Locate every search excerpt in the transcript."""
    return [locate_excerpt(transcript, e, min_match_score) for e in excerpts]


def unmatched_excerpts(matches: Sequence[ExcerptMatch]) -> List[str]:
    """Excerpts that could not be traced back to the transcript."""
    return [m.excerpt for m in matches if not m.found]


def join_transcript_pieces(pieces: Sequence[Optional[str]]) -> str:
    """Join chunk transcriptions the way the live transcript grows: each piece followed by a space."""
    return ''.join(f"{p} " for p in pieces if p)
