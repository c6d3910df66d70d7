"""
exposure/aggregators/stats_aggregator.py
Basic message counts for the results header.
"""

from typing import List

from exposure.models.record import Message, Stats

SECONDS_PER_DAY = 60 * 60 * 24


def calculate_stats(messages: List[Message]) -> Stats:
    """
    total counts every role; time_span covers all messages,
    avg_message_length only user messages.
    """
    user_messages = [m for m in messages if m.role == 'user']
    assistant_count = sum(1 for m in messages if m.role == 'assistant')

    if messages:
        stamps = [m.timestamp.timestamp() for m in messages]
        days = int((max(stamps) - min(stamps)) // SECONDS_PER_DAY)
    else:
        days = 0

    avg_length = 0
    if user_messages:
        avg_length = sum(len(m.content) for m in user_messages) // len(user_messages)

    return Stats(
        total_messages     = len(messages),
        user_messages      = len(user_messages),
        assistant_messages = assistant_count,
        time_span          = f"{days} days",
        avg_message_length = avg_length,
    )
