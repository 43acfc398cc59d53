"""Reply signal detection: tags, cognitive distortions, commitment, affect.

Pure, deterministic keyword heuristics; no NLP models or external services.
Detection never raises on empty or unexpected text; absence of signal simply
yields empty tags and no distortion.

Example:
    detector = SignalDetector()
    result = detector.detect("I'm feeling anxious and worried about everything")
    result.tags              # ["anxiety", "overwhelm"]
    result.distortion_label  # "all-or-nothing"
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Tuple

from mindcoach.domain.models.coach import MAX_TAGS, normalize_tags
from mindcoach.signals.lexicons import (
    AFFECT_WEIGHTS,
    COMMITMENT_PHRASES,
    DISTORTION_MARKERS,
    TAG_LEXICONS,
)

_WORD_RE = re.compile(r"[a-z']+")


@dataclass(frozen=True)
class SignalResult:
    """Signals detected in a single reply."""

    tags: List[str] = field(default_factory=list)
    distortions: List[str] = field(default_factory=list)  # priority order

    @property
    def distortion_label(self) -> Optional[str]:
        """Highest-priority distortion, usable as reframe guidance."""
        return self.distortions[0] if self.distortions else None

    @property
    def signal_count(self) -> int:
        return len(self.tags) + len(self.distortions)


@dataclass(frozen=True)
class AffectScore:
    """Average affect of matched words (-1..1) and how many matched."""

    net: float = 0.0
    intensity: int = 0


def normalize_text(text: Optional[str]) -> str:
    """Lower-case text and fold typographic apostrophes to ASCII."""
    if not text:
        return ""
    return text.lower().replace("’", "'").replace("‘", "'")


class SignalDetector:
    """Classifies free-form replies with curated keyword lexicons.

    Lexicons can be injected for testing or localisation; the defaults live
    in ``mindcoach.signals.lexicons``.
    """

    def __init__(
        self,
        tag_lexicons: Optional[Dict[str, Tuple[str, ...]]] = None,
        distortion_markers: Optional[List[Tuple[str, Tuple[str, ...]]]] = None,
        commitment_phrases: Optional[Tuple[str, ...]] = None,
        max_tags: int = MAX_TAGS,
    ):
        self.tag_lexicons = tag_lexicons if tag_lexicons is not None else TAG_LEXICONS
        self.distortion_markers = (
            distortion_markers if distortion_markers is not None else DISTORTION_MARKERS
        )
        self.max_tags = min(max_tags, MAX_TAGS)
        phrases = commitment_phrases if commitment_phrases is not None else COMMITMENT_PHRASES
        # "i can" must not fire on "i can't"
        self._commitment_patterns: List[Pattern[str]] = [
            re.compile(rf"\b{re.escape(phrase)}\b(?!'t)") for phrase in phrases
        ]

    def detect(self, text: Optional[str]) -> SignalResult:
        """Detect tags and distortions in ``text``.

        Returns:
            SignalResult with tags (deduplicated, sorted, capped at max_tags)
            and distortion labels in priority order.
        """
        lowered = normalize_text(text)
        if not lowered.strip():
            return SignalResult()

        return SignalResult(
            tags=self.detect_tags(lowered),
            distortions=self.detect_distortions(lowered),
        )

    def detect_tags(self, text: Optional[str]) -> List[str]:
        """Tags whose lexicon has at least one keyword in ``text``."""
        lowered = normalize_text(text)
        matched = [
            tag
            for tag, keywords in self.tag_lexicons.items()
            if any(keyword in lowered for keyword in keywords)
        ]
        return normalize_tags(matched, self.max_tags)

    def detect_distortions(self, text: Optional[str]) -> List[str]:
        """Distortion labels whose markers appear in ``text``, in priority order."""
        lowered = normalize_text(text)
        return [
            label
            for label, markers in self.distortion_markers
            if any(marker in lowered for marker in markers)
        ]

    def has_commitment(self, text: Optional[str]) -> bool:
        """True when the reply contains commitment language ("I will", "I can")."""
        lowered = normalize_text(text)
        return any(pattern.search(lowered) for pattern in self._commitment_patterns)

    @staticmethod
    def word_count(text: Optional[str]) -> int:
        if not text:
            return 0
        return len(text.split())

    def richness(self, text: Optional[str], signals: Optional[SignalResult] = None) -> int:
        """How informative a reply is: word count plus detected signals."""
        if signals is None:
            signals = self.detect(text)
        return self.word_count(text) + signals.signal_count

    @staticmethod
    def affect_score(text: Optional[str]) -> AffectScore:
        """Average weight of affect words in ``text``."""
        words = _WORD_RE.findall(normalize_text(text))
        weights = [AFFECT_WEIGHTS[w] for w in words if w in AFFECT_WEIGHTS]
        if not weights:
            return AffectScore()
        return AffectScore(net=sum(weights) / len(weights), intensity=len(weights))
