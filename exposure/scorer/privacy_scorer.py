"""
exposure/scorer/privacy_scorer.py
Composite 0–100 privacy exposure score.

  volume    min(30, user_messages / 10)
  names     8 per reported name
  locations 10 per 'lives' city, 6 per 'works' city
  emails    8 each
  phones    12 each

The sum is floored and capped at 100. Pass an already-computed
PersonalInfo to avoid running the extractors a second time; the result
is identical either way.
"""

import math
from typing import List, Optional

from exposure.extractors.location_extractor import extract_locations
from exposure.extractors.name_extractor import extract_names
from exposure.extractors.pattern_extractors import (
    extract_emails,
    extract_phone_numbers,
    user_text,
)
from exposure.models.record import Message, PersonalInfo

MAX_SCORE          = 100
MAX_VOLUME_POINTS  = 30
MESSAGES_PER_POINT = 10

WEIGHTS = {
    'name':   8,
    'lives':  10,
    'works':  6,
    'email':  8,
    'phone':  12,
}


def calculate_privacy_score(
    messages:      List[Message],
    personal_info: Optional[PersonalInfo] = None,
) -> int:
    user_count = sum(1 for m in messages if m.role == 'user')

    if personal_info is None:
        text      = user_text(messages)
        names     = extract_names(messages)
        locations = extract_locations(messages)
        emails    = extract_emails(text)
        phones    = extract_phone_numbers(text)
    else:
        names     = personal_info.names
        locations = personal_info.locations
        emails    = personal_info.emails
        phones    = personal_info.phone_numbers

    score = min(MAX_VOLUME_POINTS, user_count / MESSAGES_PER_POINT)
    score += len(names) * WEIGHTS['name']
    score += sum(1 for l in locations if l.type == 'lives') * WEIGHTS['lives']
    score += sum(1 for l in locations if l.type == 'works') * WEIGHTS['works']
    score += len(emails) * WEIGHTS['email']
    score += len(phones) * WEIGHTS['phone']

    return min(MAX_SCORE, math.floor(score))
