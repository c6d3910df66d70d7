"""
exposure/report.py
Analysis orchestration and result serialization.

Input: parsed export JSON (dict or list) or an already-flattened message list.
Output: AnalysisResult, and result_to_dict() for the JSON the results
page reads (camelCase keys, ISO-8601 UTC timestamps).

Every analyzer reads the same message list and nothing else; none of
them depends on another's output. Personal info is extracted once and
shared by the findings and the scorer.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List

from exposure.aggregators.stats_aggregator import calculate_stats
from exposure.aggregators.temporal_aggregator import analyse_temporal_patterns
from exposure.aggregators.theme_aggregator import find_repetitive_themes
from exposure.aggregators.vulnerability_aggregator import analyse_vulnerability_patterns
from exposure.detectors.moment_ranker import find_juiciest_moments
from exposure.detectors.topic_detector import extract_sensitive_topics
from exposure.extractors.pattern_extractors import extract_personal_info
from exposure.models.record import AnalysisResult, Findings, Message
from exposure.parsers.export_parser import extract_messages
from exposure.scorer import calculate_privacy_score

logger = logging.getLogger(__name__)


def analyse_chat_history(data: Any) -> AnalysisResult:
    """Run the full analysis over parsed export JSON. Never raises on odd shapes."""
    return analyse_messages(extract_messages(data))


def analyse_messages(messages: List[Message]) -> AnalysisResult:
    personal_info = extract_personal_info(messages)

    result = AnalysisResult(
        privacy_score = calculate_privacy_score(messages, personal_info),
        findings      = Findings(
            personal_info          = personal_info,
            sensitive_topics       = extract_sensitive_topics(messages),
            vulnerability_patterns = analyse_vulnerability_patterns(messages),
            temporal_insights      = analyse_temporal_patterns(messages),
            repetitive_themes      = find_repetitive_themes(messages),
        ),
        juiciest_moments = find_juiciest_moments(messages),
        stats            = calculate_stats(messages),
    )

    logger.info(
        f"Analysis complete: {result.stats.total_messages} messages, "
        f"score={result.privacy_score}, "
        f"names={len(personal_info.names)}, locations={len(personal_info.locations)}"
    )
    return result


# ── SERIALIZATION ────────────────────────────────────────────

_CAMEL = re.compile(r'_([a-z])')

# Optional fields left out of the output when unset
_OMIT_IF_NONE = frozenset({'relationship'})


def _camel(name: str) -> str:
    return _CAMEL.sub(lambda m: m.group(1).upper(), name)


def format_timestamp(ts: datetime) -> str:
    """UTC, millisecond precision, 'Z' suffix: 2023-11-14T22:13:20.000Z"""
    utc = ts.astimezone(timezone.utc)
    return utc.strftime('%Y-%m-%dT%H:%M:%S.') + f"{utc.microsecond // 1000:03d}Z"


def result_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Convert AnalysisResult to a JSON-serializable dict with camelCase keys."""
    def _to_plain(obj):
        if hasattr(obj, '__dataclass_fields__'):
            out = {}
            for name in obj.__dataclass_fields__:
                value = getattr(obj, name)
                if value is None and name in _OMIT_IF_NONE:
                    continue
                out[_camel(name)] = _to_plain(value)
            return out
        if isinstance(obj, list):
            return [_to_plain(x) for x in obj]
        if isinstance(obj, datetime):
            return format_timestamp(obj)
        return obj

    return _to_plain(result)
