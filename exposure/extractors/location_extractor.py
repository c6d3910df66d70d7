"""
exposure/extractors/location_extractor.py
Cities the user lives in, works in, visits or keeps mentioning.

Only cities in KNOWN_CITIES are reported. Per user message, trigger
phrases are tried in precedence order:

  lives   "I live in X", "based in X", "moved to X"      +5, always wins
  works   "I work in X", "office in X", "job in X"       +3, unless lives
  visits  "visited X", "trip to X", "holiday in X"       +1, unless lives/works

Once a city is 'lives' it is never downgraded. Afterwards, any known
city not yet captured is counted as a bare whole-word mention across all
user text and kept as 'mentions' only at ≥ 5 occurrences.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from exposure.detectors.noise_filter import is_business_context
from exposure.models.record import LocationMention, Message

KNOWN_CITIES: Tuple[str, ...] = (
    'London', 'Paris', 'New York', 'Los Angeles', 'Chicago', 'Houston', 'Phoenix',
    'Sydney', 'Melbourne', 'Brisbane', 'Perth', 'Adelaide', 'Toronto', 'Vancouver',
    'Montreal', 'Leeds', 'Manchester', 'Birmingham', 'Liverpool', 'Brighton',
    'Bristol', 'Edinburgh', 'Glasgow', 'Dublin', 'Belfast', 'Cardiff', 'Sheffield',
    'Newcastle', 'Nottingham', 'Leicester', 'Cambridge', 'Oxford', 'York',
    'Berlin', 'Munich', 'Hamburg', 'Frankfurt', 'Rome', 'Milan', 'Venice',
    'Madrid', 'Barcelona', 'Seville', 'Lisbon', 'Porto', 'Amsterdam', 'Rotterdam',
    'Brussels', 'Vienna', 'Prague', 'Copenhagen', 'Stockholm', 'Oslo', 'Helsinki',
    'Athens', 'Budapest', 'Warsaw', 'Moscow',
)

TYPE_ORDER: Dict[str, int] = {'lives': 4, 'works': 3, 'visits': 2, 'mentions': 1}

# Trigger phrases match in any case; the city token must be Capitalised.
# ASCII word boundaries: "Parisé" still yields "Paris".
LIVES_PATTERNS: Tuple['re.Pattern', ...] = (
    re.compile(
        r"\b(?i:i live in|i'm living in|i'm based in|based in|living in|moved to|relocating to)"
        r"\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)\b",
        re.ASCII,
    ),
    re.compile(r'\b(?i:my home is in|home in|resident of|renting in)\s+([A-Z][a-z]+)\b', re.ASCII),
)
WORKS_PATTERNS: Tuple['re.Pattern', ...] = (
    re.compile(
        r'\b(?i:i work in|working in|my office is in|office in|job in|employed in)'
        r'\s+([A-Z][a-z]+)\b',
        re.ASCII,
    ),
)
VISITS_PATTERNS: Tuple['re.Pattern', ...] = (
    re.compile(
        r'\b(?i:visited|visiting|went to|going to|trip to|traveled to|holiday in|vacation in)'
        r'\s+([A-Z][a-z]+)\b',
        re.ASCII,
    ),
)

LIVES_WEIGHT  = 5
WORKS_WEIGHT  = 3
VISITS_WEIGHT = 1
MIN_BARE_MENTIONS = 5
MAX_CONTEXTS  = 2
EXCERPT_LENGTH = 100
TOP_N = 8


@dataclass
class _Entry:
    type:      str
    mentions:  int        = 0
    contexts:  List[str]  = field(default_factory=list)


# ── PATTERN HANDLERS ─────────────────────────────────────────

def _on_lives(city: str, content: str, loc_map: Dict[str, _Entry]) -> None:
    entry = loc_map.setdefault(city, _Entry('lives'))
    entry.mentions += LIVES_WEIGHT
    entry.type = 'lives'
    if len(entry.contexts) < MAX_CONTEXTS:
        entry.contexts.append(content[:EXCERPT_LENGTH])


def _on_works(city: str, content: str, loc_map: Dict[str, _Entry]) -> None:
    entry = loc_map.setdefault(city, _Entry('works'))
    if entry.type != 'lives':
        entry.mentions += WORKS_WEIGHT
        entry.type = 'works'


def _on_visits(city: str, content: str, loc_map: Dict[str, _Entry]) -> None:
    entry = loc_map.setdefault(city, _Entry('visits'))
    if entry.type not in ('lives', 'works'):
        entry.mentions += VISITS_WEIGHT
        entry.type = 'visits'


# Precedence is list order
LOCATION_PATTERNS = (
    (LIVES_PATTERNS,  _on_lives),
    (WORKS_PATTERNS,  _on_works),
    (VISITS_PATTERNS, _on_visits),
)


# ── EXTRACTION ───────────────────────────────────────────────

def extract_locations(messages: List[Message]) -> List[LocationMention]:
    """
    Scan user messages for known cities.
    Returns at most 8, ordered lives > works > visits > mentions, then by count.
    """
    user_messages = [m for m in messages if m.role == 'user']
    loc_map: Dict[str, _Entry] = {}

    for msg in user_messages:
        content = msg.content
        if is_business_context(content):
            continue
        for patterns, handler in LOCATION_PATTERNS:
            for pattern in patterns:
                for match in pattern.finditer(content):
                    city = match.group(1)
                    if city in KNOWN_CITIES:
                        handler(city, content, loc_map)

    all_text = ' '.join(m.content for m in user_messages).lower()
    for city in KNOWN_CITIES:
        if city in loc_map:
            continue
        count = len(re.findall(r'\b' + re.escape(city.lower()) + r'\b', all_text, re.ASCII))
        if count >= MIN_BARE_MENTIONS:
            loc_map[city] = _Entry('mentions', mentions=count)

    results = [
        LocationMention(location=city, mentions=entry.mentions, type=entry.type)
        for city, entry in loc_map.items()
        if entry.mentions >= 1
    ]
    results.sort(key=lambda l: (-TYPE_ORDER[l.type], -l.mentions))
    return results[:TOP_N]
