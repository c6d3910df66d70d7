"""
exposure/detectors/moment_ranker.py
Ranks the most revealing single user messages ("juiciest moments").

Each indicator is either a keyword list (score × number of keywords hit)
or an hour window (flat score). A message is kept at a raw total of ≥ 10;
juice_score = min(10, total // 7).
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from exposure.detectors.noise_filter import (
    MOMENT_KEEP_LENGTH,
    MOMENT_MAX_LENGTH,
    is_business_context,
)
from exposure.models.record import JuicyMoment, Message


@dataclass(frozen=True)
class JuiceIndicator:
    category:    str
    score:       int
    keywords:    Tuple[str, ...]                   = ()
    hour_check:  Optional[Callable[[int], bool]]   = None


# Declaration order decides `category` and the order of `reason`
JUICE_INDICATORS: Tuple[JuiceIndicator, ...] = (
    JuiceIndicator('late_night', 10, hour_check=lambda h: 0 <= h <= 4),
    JuiceIndicator('emotional', 9, (
        'i feel', "i'm feeling", 'makes me feel', 'heartbroken', 'crying',
    )),
    JuiceIndicator('confessional', 10, (
        'honestly i', 'truth is', 'i have to admit', 'confession', 'never told',
    )),
    JuiceIndicator('desperate', 10, (
        "i'm desperate", 'please help me', "don't know what to do",
    )),
    JuiceIndicator('intimate', 9, (
        'i love', 'in love with', 'slept with',
    )),
    JuiceIndicator('vulnerable', 8, (
        "i'm scared", "i'm afraid", 'terrified', 'worried that',
    )),
    JuiceIndicator('relationship', 8, (
        'my ex', 'broke up', 'breakup', 'mental breakdown', 'ex girlfriend', 'ex boyfriend',
    )),
    JuiceIndicator('personal_failure', 8, (
        'i failed', 'i messed up', 'i fucked up', "i'm ashamed",
    )),
)

MIN_TOTAL_SCORE = 10
SCORE_DIVISOR   = 7
MAX_JUICE       = 10
EXCERPT_LENGTH  = 300
MAX_REASONS     = 3
MAX_MOMENTS     = 12


def score_message(msg: Message) -> Tuple[int, List[str]]:
    """Return (raw total score, matched categories in declaration order)."""
    lower = msg.content.lower()
    hour  = msg.timestamp.hour
    total = 0
    matched: List[str] = []

    for indicator in JUICE_INDICATORS:
        if indicator.keywords:
            hits = sum(1 for kw in indicator.keywords if kw in lower)
            if hits:
                total += indicator.score * hits
                matched.append(indicator.category)
        if indicator.hour_check is not None and indicator.hour_check(hour):
            total += indicator.score
            matched.append(indicator.category)

    return total, matched


def find_juiciest_moments(messages: List[Message]) -> List[JuicyMoment]:
    """
    Score every eligible user message.
    Returns up to 12 moments, highest juice_score first.
    """
    moments: List[JuicyMoment] = []

    for msg in messages:
        if msg.role != 'user':
            continue
        if is_business_context(msg.content) or len(msg.content) > MOMENT_MAX_LENGTH:
            continue

        total, matched = score_message(msg)
        if total < MIN_TOTAL_SCORE or len(msg.content) >= MOMENT_KEEP_LENGTH:
            continue

        moments.append(JuicyMoment(
            excerpt     = msg.content[:EXCERPT_LENGTH],
            timestamp   = msg.timestamp,
            juice_score = min(MAX_JUICE, total // SCORE_DIVISOR),
            reason      = ', '.join(matched[:MAX_REASONS]),
            category    = matched[0] if matched else 'personal',
        ))

    moments.sort(key=lambda m: -m.juice_score)
    return moments[:MAX_MOMENTS]
