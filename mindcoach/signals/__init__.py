"""Reply signal detection.

Keyword lexicons live in ``lexicons``; ``SignalDetector`` turns a reply into
tags, distortion labels, commitment and affect signals.
"""

from mindcoach.signals.signal_detector import (
    AffectScore,
    SignalDetector,
    SignalResult,
)

__all__ = [
    "AffectScore",
    "SignalDetector",
    "SignalResult",
]
