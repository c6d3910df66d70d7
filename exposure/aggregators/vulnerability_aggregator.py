"""
exposure/aggregators/vulnerability_aggregator.py
Time-of-day aggregation of user messages.

Each user message lands in one of four local-time windows. Every
non-empty window gets the emotional tone with the highest total keyword
hit count across its messages. Ties keep the earlier tone in
TONE_KEYWORDS; with no hits at all the tone is 'seeking_help'.
Windows appear in the order their first message was seen.
"""

from collections import defaultdict
from typing import Dict, List, Tuple

from exposure.models.record import Message, VulnerabilityPattern

LATE_NIGHT = 'Late Night (12am-6am)'
MORNING    = 'Morning (6am-12pm)'
AFTERNOON  = 'Afternoon (12pm-6pm)'
EVENING    = 'Evening (6pm-12am)'

TONE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    'desperate':    ('help me', 'please help', 'desperate', 'urgent'),
    'anxious':      ('worried', 'anxious', 'nervous', 'scared', 'afraid'),
    'confessional': ('honestly', 'confession', 'truth is', 'i have to admit'),
    'seeking_help': ('advice', 'guidance', 'what should', 'how do i'),
}
DEFAULT_TONE = 'seeking_help'

COMMON_THEMES: Tuple[str, ...] = ('support seeking', 'problem solving')


def time_block(hour: int) -> str:
    if 0 <= hour < 6:
        return LATE_NIGHT
    if 6 <= hour < 12:
        return MORNING
    if 12 <= hour < 18:
        return AFTERNOON
    return EVENING


def dominant_tone(messages: List[Message]) -> str:
    best, best_score = DEFAULT_TONE, 0
    for tone, words in TONE_KEYWORDS.items():
        score = 0
        for msg in messages:
            lower = msg.content.lower()
            score += sum(1 for w in words if w in lower)
        if score > best_score:
            best, best_score = tone, score
    return best


def analyse_vulnerability_patterns(messages: List[Message]) -> List[VulnerabilityPattern]:
    blocks: Dict[str, List[Message]] = defaultdict(list)
    for msg in messages:
        if msg.role == 'user':
            blocks[time_block(msg.timestamp.hour)].append(msg)

    return [
        VulnerabilityPattern(
            time_of_day    = block,
            frequency      = len(block_messages),
            common_themes  = list(COMMON_THEMES),
            emotional_tone = dominant_tone(block_messages),
        )
        for block, block_messages in blocks.items()
    ]
