"""
exposure/scorer — privacy exposure scoring.
"""

from exposure.scorer.privacy_scorer import (
    MAX_SCORE,
    calculate_privacy_score,
)

__all__ = [
    "MAX_SCORE",
    "calculate_privacy_score",
]
