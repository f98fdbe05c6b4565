"""
Safety Module

Disclaimers attached to safety verdicts.
"""

from .disclaimers import DisclaimerInjector, SHORT_DISCLAIMER, DANGER_NOTICE, RETRY_NOTICE

__all__ = [
    "DisclaimerInjector",
    "DANGER_NOTICE",
    "RETRY_NOTICE",
    "SHORT_DISCLAIMER",
]
