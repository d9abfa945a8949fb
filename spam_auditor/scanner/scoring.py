"""
Scoring is a plain logical OR over five signals, no weighting.
"""
from spam_auditor.scanner.queries import CommentCounts, HeuristicHits
from spam_auditor.scanner.settings import AuditSettings

# Fixed, not configurable
KEYWORD_HITS_THRESHOLD = 10
LINK_HEAVY_HITS_THRESHOLD = 10


def score(counts: CommentCounts, ratio: float, hits: HeuristicHits, settings: AuditSettings) -> bool:
    return (
        counts.spam >= settings.spam_threshold
        or counts.pending >= settings.pending_threshold
        or ratio >= settings.spam_ratio_threshold
        or hits.keyword_hits >= KEYWORD_HITS_THRESHOLD
        or hits.link_heavy_hits >= LINK_HEAVY_HITS_THRESHOLD
    )
