"""
exposure/models/record.py
Shared dataclass schema. The parser, every extractor/analyzer and the
report layer use these types. Do not add logic here — data only.

Field names are snake_case here; report.result_to_dict() renders them
with the camelCase keys the results page reads.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class Message:
    """One flattened node of a chat export."""
    role:       str             # user / assistant / system (tool etc. passed through)
    content:    str             # content.parts joined with a single space
    timestamp:  datetime        # local time; now() when create_time is missing


# ── PERSONAL INFO ────────────────────────────────────────────

@dataclass
class NameMention:
    name:          str
    mentions:      int
    contexts:      List[str]       = field(default_factory=list)   # ≤ 2 excerpts
    relationship:  Optional[str]   = None


@dataclass
class LocationMention:
    location:  str
    mentions:  int
    type:      str                 # lives / works / visits / mentions


@dataclass
class PersonalInfo:
    names:          List[NameMention]      = field(default_factory=list)
    locations:      List[LocationMention]  = field(default_factory=list)
    ages:           List[str]              = field(default_factory=list)
    emails:         List[str]              = field(default_factory=list)
    phone_numbers:  List[str]              = field(default_factory=list)
    relationships:  List[str]              = field(default_factory=list)
    work_info:      List[str]              = field(default_factory=list)


# ── TOPICS & PATTERNS ────────────────────────────────────────

@dataclass
class SensitiveTopic:
    category:   str             # health / mental_health / financial / relationship / personal_struggle / secret
    excerpt:    str             # ≤ 200 chars
    timestamp:  datetime
    severity:   int


@dataclass
class VulnerabilityPattern:
    time_of_day:     str
    frequency:       int
    common_themes:   List[str]
    emotional_tone:  str        # desperate / anxious / confessional / seeking_help


@dataclass
class TemporalInsight:
    hour:           int
    message_count:  int
    vulnerability:  int
    top_topics:     List[str]   = field(default_factory=list)


@dataclass
class RepetitiveTheme:
    theme:             str
    mentions:          int
    related_excerpts:  List[str]
    obsession_level:   int      # 0–10


@dataclass
class JuicyMoment:
    excerpt:      str           # ≤ 300 chars
    timestamp:    datetime
    juice_score:  int           # 0–10
    reason:       str
    category:     str


# ── RESULT ───────────────────────────────────────────────────

@dataclass
class Stats:
    total_messages:      int = 0
    user_messages:       int = 0
    assistant_messages:  int = 0
    time_span:           str = '0 days'
    avg_message_length:  int = 0


@dataclass
class Findings:
    personal_info:          PersonalInfo                = field(default_factory=PersonalInfo)
    sensitive_topics:       List[SensitiveTopic]        = field(default_factory=list)
    vulnerability_patterns: List[VulnerabilityPattern]  = field(default_factory=list)
    temporal_insights:      List[TemporalInsight]       = field(default_factory=list)
    repetitive_themes:      List[RepetitiveTheme]       = field(default_factory=list)


@dataclass
class AnalysisResult:
    """The single output of one analysis run."""
    privacy_score:     int
    findings:          Findings
    juiciest_moments:  List[JuicyMoment]   = field(default_factory=list)
    stats:             Stats               = field(default_factory=Stats)
