"""
exposure/detectors/topic_detector.py
Sensitive-topic detection — keyword dictionaries over user messages.

Every sentence that contains a matched keyword becomes one
SensitiveTopic, so a single message can yield several. Severity is the
number of distinct keywords the message hit in that category, plus a
fixed bonus for mental health and secrets.
"""

import re
from typing import Dict, List, Tuple

from exposure.detectors.noise_filter import TOPIC_MAX_LENGTH, is_business_context
from exposure.models.record import Message, SensitiveTopic

# ── KEYWORD DICTIONARIES ─────────────────────────────────────
# Keys become SensitiveTopic.category. All keywords lower-case.

SENSITIVE_KEYWORDS: Dict[str, Tuple[str, ...]] = {

    'health': (
        'diagnosed with', 'my diagnosis', 'doctor said', 'hospital for',
        'surgery on', 'blood test', 'medical condition',
    ),

    'mental_health': (
        'my therapist', 'therapy session', 'diagnosed with anxiety',
        'diagnosed with depression', 'suicidal thoughts', 'panic attack',
        'mental breakdown', 'tried to kill', 'kill myself',
    ),

    'financial': (
        'in debt', 'debt free', 'credit card', 'credit score', 'loan',
        'overdraft', "can't afford", 'bankruptcy', 'balance obscured',
    ),

    'relationship': (
        'we broke up', 'broke up with', 'my divorce', 'cheated on',
        'ex girlfriend', 'ex boyfriend', 'relationship ended',
    ),

    'personal_struggle': (
        'struggling with', "can't cope", "i'm struggling", 'feel like a failure',
    ),

    'secret': (
        "don't tell anyone", 'never told anyone', 'nobody knows', 'keeping secret',
    ),
}

SEVERITY_BONUS: Dict[str, int] = {
    'mental_health': 3,
    'secret':        3,
}

SENTENCE_SPLIT = re.compile(r'[.!?]+')

MIN_SENTENCE_LENGTH = 30
MAX_SENTENCE_LENGTH = 300
EXCERPT_LENGTH      = 200
MAX_TOPICS          = 15


def extract_sensitive_topics(messages: List[Message]) -> List[SensitiveTopic]:
    """
    Scan user messages for sensitive topics.
    Returns up to 15 topics, highest severity first.
    """
    topics: List[SensitiveTopic] = []

    for msg in messages:
        if msg.role != 'user':
            continue
        if is_business_context(msg.content) and len(msg.content) > TOPIC_MAX_LENGTH:
            continue

        lower = msg.content.lower()
        for category, keywords in SENSITIVE_KEYWORDS.items():
            matched = [kw for kw in keywords if kw in lower]
            if not matched:
                continue

            severity = len(matched) + SEVERITY_BONUS.get(category, 0)
            for sentence in SENTENCE_SPLIT.split(msg.content):
                sentence_lower = sentence.lower()
                if not any(kw in sentence_lower for kw in matched):
                    continue
                trimmed = sentence.strip()
                if not MIN_SENTENCE_LENGTH <= len(trimmed) < MAX_SENTENCE_LENGTH:
                    continue
                if is_business_context(trimmed):
                    continue
                topics.append(SensitiveTopic(
                    category  = category,
                    excerpt   = trimmed[:EXCERPT_LENGTH],
                    timestamp = msg.timestamp,
                    severity  = severity,
                ))

    topics.sort(key=lambda t: -t.severity)
    return topics[:MAX_TOPICS]
