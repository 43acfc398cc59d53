"""MindCoach: a deterministic conversational coaching engine.

Walks a user through stabilize -> open -> reflect -> reframe -> plan -> close,
records one CoachEvent per reply and offers analytics over those events.
"""

__version__ = "0.1.0"
