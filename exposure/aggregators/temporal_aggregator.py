"""
exposure/aggregators/temporal_aggregator.py
Hour-of-day histogram of user messages.

vulnerability is a fixed weight per hour band, not derived from content:
  22–23 and 0–4  → 8
  5–7            → 6
  otherwise      → 4
Hours appear in the order their first message was seen.
"""

from collections import Counter
from typing import List

from exposure.models.record import Message, TemporalInsight


def hour_vulnerability(hour: int) -> int:
    if hour >= 22 or hour <= 4:
        return 8
    if 5 <= hour <= 7:
        return 6
    return 4


def analyse_temporal_patterns(messages: List[Message]) -> List[TemporalInsight]:
    counts = Counter(m.timestamp.hour for m in messages if m.role == 'user')
    return [
        TemporalInsight(
            hour          = hour,
            message_count = count,
            vulnerability = hour_vulnerability(hour),
            top_topics    = [],
        )
        for hour, count in counts.items()
    ]
