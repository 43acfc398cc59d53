"""Keyword lexicons for reply classification.

Every lexicon is matched by substring against the lower-cased reply, so
entries are stems or phrases ("overwhelm" covers "overwhelmed" and
"overwhelming"). Keep entries long enough not to fire inside unrelated words.
"""

from typing import Dict, List, Tuple

# Tag -> keywords. Any keyword present contributes the tag.
TAG_LEXICONS: Dict[str, Tuple[str, ...]] = {
    "anxiety": (
        "anxious",
        "anxiety",
        "worried",
        "worry",
        "nervous",
        "panicky",
        "stressed",
        "stress",
    ),
    "panic": ("panic",),
    "overwhelm": (
        "overwhelm",
        "too much",
        "everything",
        "swamped",
    ),
    "low_energy": (
        "tired",
        "exhausted",
        "drained",
        "fatigue",
        "low energy",
        "no energy",
    ),
    "sleep": (
        "sleep",
        "insomnia",
        "bedtime",
        "awake all night",
    ),
    "gratitude": (
        "grateful",
        "thankful",
        "appreciate",
        "blessed",
    ),
    "self_compassion": (
        "compassion",
        "kind to myself",
        "gentle with myself",
        "forgive myself",
    ),
    "rumination": (
        "ruminat",
        "overthink",
        "obsessing",
        "can't stop thinking",
    ),
    "focus_restart": (
        "restart",
        "reset",
        "refocus",
        "distracted",
        "scattered",
    ),
}

# Distortion label -> markers, in reporting priority order.
DISTORTION_MARKERS: List[Tuple[str, Tuple[str, ...]]] = [
    (
        "all-or-nothing",
        (
            "always",
            "never",
            "everything",
            "everyone",
            "no one",
            "nothing works",
            "all the time",
        ),
    ),
    (
        "catastrophizing",
        (
            "ruined",
            "disaster",
            "can't handle",
            "worst",
            "doomed",
            "go wrong",
            "goes wrong",
        ),
    ),
    (
        "mind-reading",
        (
            "they think",
            "everyone thinks",
            "he thinks",
            "she thinks",
            "people think",
            "will judge",
        ),
    ),
    (
        "overgeneralizing",
        (
            "every time",
            "it's all the same",
            "this always happens",
            "typical",
            "just like",
        ),
    ),
]

# Phrases that signal the user committing to an action.
COMMITMENT_PHRASES: Tuple[str, ...] = (
    "i can",
    "i will",
    "i'll",
    "i am going to",
    "i'm going to",
    "i plan to",
    "i commit",
    "i'm gonna",
)

# Word -> affect weight (-1 negative .. +1 positive).
AFFECT_WEIGHTS: Dict[str, float] = {
    "happy": 0.8,
    "good": 0.6,
    "great": 0.9,
    "amazing": 1.0,
    "calm": 0.7,
    "peaceful": 0.8,
    "grateful": 0.9,
    "hopeful": 0.8,
    "excited": 0.7,
    "wonderful": 0.9,
    "fantastic": 1.0,
    "love": 0.8,
    "bad": -0.6,
    "terrible": -0.9,
    "awful": -0.9,
    "horrible": -1.0,
    "sad": -0.7,
    "angry": -0.8,
    "anxious": -0.7,
    "worried": -0.6,
    "stressed": -0.7,
    "frustrated": -0.8,
    "overwhelmed": -0.9,
    "scared": -0.8,
    "hate": -0.9,
    "disaster": -1.0,
    "ruined": -0.8,
}
