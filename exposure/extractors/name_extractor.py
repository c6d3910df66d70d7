"""
exposure/extractors/name_extractor.py
Names of people the user talks about.

Only user messages are scanned. Patterns run in a fixed order per message:

  1. relationship   "my wife Sarah"      seeds an entry, +2, records relationship
  2. possessive     "Sarah's"            +1 and an excerpt, known names only
  3. contact verb   "texted Sarah"       +1, known names only

Patterns 2 and 3 never create entries: a capitalised word after "with"
or before "'s" is as often a sentence start or a brand as a person.
An entry survives if it has ≥ 3 mentions or a relationship, and at least
one excerpt.
"""

import re
from typing import Callable, Dict, FrozenSet, List, Tuple

from exposure.detectors.noise_filter import NAME_MAX_LENGTH, is_business_context
from exposure.models.record import Message, NameMention

# ── DICTIONARIES ─────────────────────────────────────────────

COMMON_FIRST_NAMES: FrozenSet[str] = frozenset({
    # Male
    'James', 'John', 'Robert', 'Michael', 'William', 'David', 'Richard', 'Joseph',
    'Thomas', 'Charles', 'Daniel', 'Matthew', 'Anthony', 'Mark', 'Donald', 'Paul',
    'Steven', 'Andrew', 'Kenneth', 'Joshua', 'Kevin', 'Brian', 'George', 'Edward',
    'Ryan', 'Jacob', 'Nicholas', 'Tyler', 'Alexander', 'Jonathan', 'Nathan',
    'Aaron', 'Eric', 'Christian', 'Benjamin', 'Samuel', 'Dylan', 'Logan', 'Brandon',
    'Jack', 'Luke', 'Henry', 'Adam', 'Connor', 'Evan', 'Max', 'Oliver', 'Liam',
    'Noah', 'Ethan', 'Mason', 'Lucas', 'Jackson', 'Aiden', 'Sebastian', 'Finn',
    'Oscar', 'Theo', 'Leo', 'Harry', 'Charlie', 'Archie', 'Freddie', 'Arthur',
    'Alfie', 'Tommy', 'Isaac', 'Toby', 'Jude', 'Reuben', 'Albie', 'Roman',
    'Jake', 'Sam', 'Tom', 'Ben', 'Dan', 'Alex', 'Chris', 'Matt', 'Josh', 'Nick',

    # Female
    'Mary', 'Patricia', 'Jennifer', 'Linda', 'Barbara', 'Elizabeth', 'Susan',
    'Jessica', 'Sarah', 'Karen', 'Nancy', 'Lisa', 'Betty', 'Margaret', 'Sandra',
    'Ashley', 'Kimberly', 'Emily', 'Donna', 'Michelle', 'Dorothy', 'Carol', 'Amanda',
    'Melissa', 'Deborah', 'Stephanie', 'Rebecca', 'Sharon', 'Laura', 'Cynthia',
    'Kathleen', 'Amy', 'Angela', 'Shirley', 'Anna', 'Brenda', 'Pamela', 'Emma',
    'Nicole', 'Helen', 'Samantha', 'Katherine', 'Christine', 'Debra', 'Rachel',
    'Catherine', 'Carolyn', 'Janet', 'Ruth', 'Maria', 'Heather', 'Diane', 'Virginia',
    'Julie', 'Joyce', 'Victoria', 'Olivia', 'Kelly', 'Christina', 'Lauren', 'Joan',
    'Evelyn', 'Judith', 'Megan', 'Cheryl', 'Andrea', 'Hannah', 'Martha', 'Jacqueline',
    'Frances', 'Gloria', 'Ann', 'Teresa', 'Kathryn', 'Sara', 'Janice', 'Jean',
    'Alice', 'Madison', 'Doris', 'Abigail', 'Julia', 'Judy', 'Grace', 'Denise',
    'Amber', 'Sophie', 'Chloe', 'Lucy', 'Ella', 'Mia', 'Amelia', 'Lily', 'Isla',
    'Ava', 'Evie', 'Charlotte', 'Poppy', 'Isabelle', 'Freya', 'Daisy',
    'Phoebe', 'Scarlett', 'Holly', 'Millie', 'Rosie', 'Leah', 'Maya', 'Milly',
    'Zoe', 'Molly', 'Ellie', 'Ruby', 'Florence', 'Ivy', 'Sophia', 'Imogen',
    'Kate', 'Katie', 'Lizzie', 'Beth', 'Annie', 'Bella',

    # Unisex
    'Jordan', 'Taylor', 'Alexis', 'Morgan', 'Casey', 'Riley', 'Jamie', 'Avery',
    'Cameron', 'Quinn', 'Parker', 'Drew', 'Jesse', 'Skylar', 'Rowan',
})

# Capitalised words that follow "my friend" etc. but are not names
COMMON_WORDS_EXCLUDE: FrozenSet[str] = frozenset({
    # Verbs / gerunds
    'Getting', 'Doing', 'Being', 'Having', 'Making', 'Taking', 'Going', 'Seeing',
    'Looking', 'Feeling', 'Thinking', 'Trying', 'Working', 'Starting', 'Running',
    'Eating', 'Drinking', 'Sleeping', 'Watching', 'Reading', 'Writing', 'Speaking',
    'Calling', 'Selling', 'Buying', 'Asking', 'Telling', 'Showing', 'Moving',
    'Living', 'Dying', 'Crying', 'Laughing', 'Smiling', 'Walking', 'Talking',
    'Sitting', 'Standing', 'Lying', 'Falling', 'Rising', 'Growing', 'Changing',
    'Helping', 'Learning', 'Teaching', 'Building', 'Breaking', 'Fixing', 'Cleaning',
    'Cooking', 'Playing', 'Fighting', 'Loving', 'Hating', 'Wanting', 'Needing',
    'Knowing', 'Believing', 'Understanding', 'Remembering', 'Forgetting', 'Hoping',
    'Wishing', 'Dreaming', 'Planning', 'Deciding', 'Choosing', 'Preferring',
    'Struggling', 'Checking', 'Offering', 'Tackling', 'Following', 'Applying',
    'Missing', 'Hitting', 'Smoking', 'Scraping', 'Noticing', 'Facing', 'Expecting',

    # Adjectives / adverbs
    'Already', 'Also', 'Only', 'Really', 'Very', 'Quite', 'Just', 'Still', 'Even',
    'Almost', 'Nearly', 'Hardly', 'Barely', 'Actually', 'Basically', 'Completely',
    'Totally', 'Fully', 'Partly', 'Slightly', 'Extremely', 'Incredibly', 'Absolutely',
    'Definitely', 'Certainly', 'Probably', 'Possibly', 'Maybe', 'Perhaps',
    'Ready', 'Eager', 'Fascinated', 'Sorry', 'Happy', 'Worried', 'Desperate',
    'Unable', 'Capable', 'Constant', 'Constantly', 'Current', 'Currently',
    'Physical', 'Physically', 'Terrified', 'Ungrateful', 'Genuinely',

    # Prepositions / conjunctions
    'About', 'Above', 'Across', 'After', 'Against', 'Along', 'Among', 'Around',
    'Before', 'Behind', 'Below', 'Beneath', 'Beside', 'Between', 'Beyond',
    'During', 'Except', 'Inside', 'Outside', 'Through', 'Toward', 'Under',
    'Until', 'Within', 'Without', 'Right', 'Using', 'Than',

    # Other
    'Something', 'Anything', 'Nothing', 'Everything', 'Someone', 'Anyone',
    'Everyone', 'Number', 'Half', 'Free', 'Wright', 'YouTuber',
})

RELATIONSHIP_WORDS: Tuple[str, ...] = (
    'friend', 'girlfriend', 'boyfriend', 'wife', 'husband', 'partner', 'brother',
    'sister', 'son', 'daughter', 'mother', 'father', 'mom', 'dad', 'mum', 'boss',
    'colleague', 'ex', 'roommate', 'flatmate',
)

# "my" and the relationship word match in any case; the name must be Capitalised.
# ASCII word boundaries: "Emmaé" still yields "Emma".
RELATIONSHIP_PATTERN = re.compile(
    r'\b(?i:my\s+(' + '|'.join(RELATIONSHIP_WORDS) + r'))\s+([A-Z][a-z]{2,12})\b',
    re.ASCII,
)
POSSESSIVE_PATTERN   = re.compile(r"\b([A-Z][a-z]{2,12})'s\b", re.ASCII)
CONTACT_VERB_PATTERN = re.compile(r'\b(?:with|to|from|met|saw|called|texted)\s+([A-Z][a-z]{2,12})\b', re.ASCII)

TEMPLATE_SLOT = re.compile(r'{{.*?}}')

EXCERPT_LENGTH = 150
MAX_CONTEXTS   = 2
MIN_MENTIONS   = 3


# ── PATTERN HANDLERS ─────────────────────────────────────────
# Each handler gets (match, content, name_map) and updates name_map in place.

NameMap = Dict[str, NameMention]


def _on_relationship(match: 're.Match', content: str, name_map: NameMap) -> None:
    relationship = match.group(1).lower()
    name         = match.group(2)
    if name not in COMMON_FIRST_NAMES or name in COMMON_WORDS_EXCLUDE:
        return

    entry = name_map.setdefault(
        name, NameMention(name=name, mentions=0, relationship=relationship)
    )
    entry.mentions += 2
    entry.relationship = entry.relationship or relationship
    if len(entry.contexts) < MAX_CONTEXTS:
        excerpt = TEMPLATE_SLOT.sub('[name]', content[:EXCERPT_LENGTH])
        if not is_business_context(excerpt):
            entry.contexts.append(excerpt)


def _on_possessive(match: 're.Match', content: str, name_map: NameMap) -> None:
    entry = name_map.get(match.group(1))
    if entry is None:
        return
    entry.mentions += 1
    if len(entry.contexts) < MAX_CONTEXTS:
        excerpt = content[:EXCERPT_LENGTH]
        if not is_business_context(excerpt):
            entry.contexts.append(excerpt)


def _on_contact_verb(match: 're.Match', content: str, name_map: NameMap) -> None:
    entry = name_map.get(match.group(1))
    if entry is not None:
        entry.mentions += 1


# Precedence is list order
NAME_PATTERNS: Tuple[Tuple['re.Pattern', Callable[['re.Match', str, NameMap], None]], ...] = (
    (RELATIONSHIP_PATTERN, _on_relationship),
    (POSSESSIVE_PATTERN,   _on_possessive),
    (CONTACT_VERB_PATTERN, _on_contact_verb),
)


# ── EXTRACTION ───────────────────────────────────────────────

def extract_names(messages: List[Message]) -> List[NameMention]:
    """
    Scan user messages for named people.
    Returns relationship-anchored names first, then by mentions descending.
    """
    name_map: NameMap = {}

    for msg in messages:
        if msg.role != 'user':
            continue
        content = msg.content
        if is_business_context(content) or len(content) > NAME_MAX_LENGTH:
            continue
        for pattern, handler in NAME_PATTERNS:
            for match in pattern.finditer(content):
                handler(match, content, name_map)

    kept = [
        entry for entry in name_map.values()
        if (entry.mentions >= MIN_MENTIONS or entry.relationship) and entry.contexts
    ]
    return sorted(kept, key=lambda e: (0 if e.relationship else 1, -e.mentions))
