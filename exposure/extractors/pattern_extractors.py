"""
exposure/extractors/pattern_extractors.py
Single-regex extractors over the concatenated user text, plus
extract_personal_info() which bundles every personal-info extractor.

All results are de-duplicated in first-seen order.
"""

import re
from typing import FrozenSet, List

from exposure.extractors.location_extractor import extract_locations
from exposure.extractors.name_extractor import extract_names
from exposure.models.record import Message, PersonalInfo

AGE_PATTERN = re.compile(
    r"\b(?:I'm|I am|age|aged)\s+(\d{1,2})\s*(?:years old|year old|yo)?\b",
    re.IGNORECASE | re.ASCII,
)
MIN_AGE = 16
MAX_AGE = 80

EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b')

# Ten consecutive digits only — no separators, no country codes
PHONE_PATTERN = re.compile(r'\b\d{10}\b', re.ASCII)

RELATIONSHIP_PATTERN = re.compile(
    r'\bmy\s+(wife|husband|partner|boyfriend|girlfriend|fiancé|fiancee|mother|father'
    r'|mom|dad|mum|son|daughter|brother|sister|friend|boss|colleague|ex)\b',
    re.IGNORECASE,
)

WORK_PATTERN = re.compile(
    r"\b(?:I work as a|working as a|I'm a|job as a)\s+([a-z\s]{4,30}?)(?:\.|,|\s+at|\s+for|\s+in)",
    re.IGNORECASE,
)
WORK_EXCLUDE: FrozenSet[str] = frozenset({'the', 'this', 'that', 'work', 'job'})
MAX_WORK_INFO = 3


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def extract_ages(text: str) -> List[str]:
    return _unique([
        m.group(1) for m in AGE_PATTERN.finditer(text)
        if MIN_AGE <= int(m.group(1)) <= MAX_AGE
    ])


def extract_emails(text: str) -> List[str]:
    return _unique(EMAIL_PATTERN.findall(text))


def extract_phone_numbers(text: str) -> List[str]:
    return _unique(PHONE_PATTERN.findall(text))


def extract_relationships(text: str) -> List[str]:
    return _unique([m.group(1).lower() for m in RELATIONSHIP_PATTERN.finditer(text)])


def extract_work_info(text: str) -> List[str]:
    found: List[str] = []
    for m in WORK_PATTERN.finditer(text):
        info = m.group(1).strip()
        if info.lower() not in WORK_EXCLUDE and len(info) >= 4:
            found.append(info)
    return _unique(found)[:MAX_WORK_INFO]


def user_text(messages: List[Message]) -> str:
    """All user message content joined with single spaces."""
    return ' '.join(m.content for m in messages if m.role == 'user')


def extract_personal_info(messages: List[Message]) -> PersonalInfo:
    """Run every personal-info extractor over the user side of the chat."""
    text = user_text(messages)
    return PersonalInfo(
        names         = extract_names(messages),
        locations     = extract_locations(messages),
        ages          = extract_ages(text),
        emails        = extract_emails(text),
        phone_numbers = extract_phone_numbers(text),
        relationships = extract_relationships(text),
        work_info     = extract_work_info(text),
    )
