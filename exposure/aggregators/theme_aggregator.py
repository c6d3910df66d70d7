"""
exposure/aggregators/theme_aggregator.py
Everyday themes the user keeps coming back to.

A theme's mention count is the number of user messages containing the
word as a case-insensitive substring ("work" also counts "network").
Kept at ≥ 5 mentions; obsession_level = min(10, mentions // 3).
"""

from typing import Dict, List, Tuple

from exposure.models.record import Message, RepetitiveTheme

COMMON_THEMES: Tuple[str, ...] = (
    'work', 'job', 'career', 'relationship', 'dating', 'family', 'health',
    'anxiety', 'stress', 'money', 'finance', 'coding', 'programming',
    'write', 'writing', 'project', 'study',
)

MIN_MENTIONS    = 5
EXCERPT_LENGTH  = 150
MAX_EXCERPTS    = 3
MAX_OBSESSION   = 10
MAX_THEMES      = 8


def find_repetitive_themes(messages: List[Message]) -> List[RepetitiveTheme]:
    excerpts: Dict[str, List[str]] = {}

    for msg in messages:
        if msg.role != 'user':
            continue
        lower = msg.content.lower()
        for theme in COMMON_THEMES:
            if theme in lower:
                excerpts.setdefault(theme, []).append(msg.content[:EXCERPT_LENGTH])

    themes = [
        RepetitiveTheme(
            theme            = theme,
            mentions         = len(found),
            related_excerpts = found[:MAX_EXCERPTS],
            obsession_level  = min(MAX_OBSESSION, len(found) // 3),
        )
        for theme, found in excerpts.items()
        if len(found) >= MIN_MENTIONS
    ]
    themes.sort(key=lambda t: -t.mentions)
    return themes[:MAX_THEMES]
