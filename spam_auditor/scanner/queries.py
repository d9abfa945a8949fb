"""
Aggregate queries against an entered tenant's comment store.

Everything here is a COUNT(*); comment bodies are only ever touched by the
database's own LIKE / REGEXP predicates, never loaded into Python.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import func

from spam_auditor.config import (
    STATUS_SPAM, STATUS_PENDING, STATUS_APPROVED, CANDIDATE_STATUSES,
)

# Metacharacters escaped before a keyword goes into the alternation
_REGEX_META = re.compile(r'[\\.^$|()\[\]{}*+?]')

LINK_MARKER = 'http'


@dataclass(frozen=True)
class CommentCounts:
    spam: int = 0
    pending: int = 0
    approved: int = 0
    candidates: int = 0

    @property
    def spam_ratio(self) -> float:
        """spam / (spam + approved), denominator floored at 1."""
        return self.spam / max(1, self.spam + self.approved)


@dataclass(frozen=True)
class HeuristicHits:
    keyword_hits: int = 0
    link_heavy_hits: int = 0


NO_HITS = HeuristicHits()


# ── Keyword predicate ────────────────────────────────────────────────────────

def escape_keyword(term: str) -> str:
    return _REGEX_META.sub(lambda m: '\\' + m.group(0), term)


@dataclass(frozen=True)
class KeywordPattern:
    """Validated alternation over escaped keywords, e.g. `(viagra|win money)`."""
    terms: tuple
    pattern: str


def build_keyword_pattern(keywords: Iterable[str]) -> Optional[KeywordPattern]:
    """
    Build the keyword alternation, or None when there is nothing to match.

    Terms are lowercased and deduplicated; the resulting pattern is compiled
    once so a malformed one fails here instead of inside the database.
    """
    terms = []
    for kw in keywords or ():
        term = (kw or '').strip().lower()
        if term and term not in terms:
            terms.append(term)
    if not terms:
        return None

    pattern = '(' + '|'.join(escape_keyword(t) for t in terms) + ')'
    re.compile(pattern)
    return KeywordPattern(terms=tuple(terms), pattern=pattern)


# ── Gate ──────────────────────────────────────────────────────────────────────

def should_run_heuristics(light_mode: bool, cutoff: int, candidate_count: int) -> bool:
    return bool(light_mode) and (cutoff == 0 or candidate_count < cutoff)


# ── Counts ────────────────────────────────────────────────────────────────────

def _in_window(comments, since: datetime):
    return comments.c.date_gmt >= since


def _candidates(comments, since: datetime):
    return (comments.c.status.in_(CANDIDATE_STATUSES), _in_window(comments, since))


def count_comments(handle, since: datetime) -> CommentCounts:
    c = handle.comments
    return CommentCounts(
        spam=handle.count(c.c.status == STATUS_SPAM, _in_window(c, since)),
        pending=handle.count(c.c.status == STATUS_PENDING, _in_window(c, since)),
        approved=handle.count(c.c.status == STATUS_APPROVED, _in_window(c, since)),
        candidates=handle.count(*_candidates(c, since)),
    )


def count_keyword_hits(handle, since: datetime, keyword_pattern: Optional[KeywordPattern]) -> int:
    if keyword_pattern is None:
        return 0
    c = handle.comments
    return handle.count(
        *_candidates(c, since),
        func.lower(c.c.content).regexp_match(keyword_pattern.pattern),
    )


def link_like_pattern(link_threshold: int) -> str:
    """
    LIKE pattern approximating "link-heavy".

    Two chained `http` markers stand in for "two or more links"; this is not an
    exact link count.
    """
    if link_threshold >= 2:
        return f'%{LINK_MARKER}%{LINK_MARKER}%'
    return f'%{LINK_MARKER}%'


def count_link_heavy(handle, since: datetime, link_threshold: int) -> int:
    c = handle.comments
    return handle.count(
        *_candidates(c, since),
        func.lower(c.c.content).like(link_like_pattern(link_threshold)),
    )


def run_heuristics(handle, since: datetime, keyword_pattern, link_threshold: int) -> HeuristicHits:
    return HeuristicHits(
        keyword_hits=count_keyword_hits(handle, since, keyword_pattern),
        link_heavy_hits=count_link_heavy(handle, since, link_threshold),
    )
