"""
Canonical import rule sets.

Callers own their rules; these are the two schemas the application ships
with, registered by name for the HTTP surface.
"""

from __future__ import annotations

from typing import Dict, List

from .errors import UnknownRuleSetError
from .models import FieldRule, FieldType

QUESTION_TYPES = ["true/false", "multiple choice", "short answer"]
DIFFICULTY_LEVELS = ["easy", "medium", "hard"]

ROSTER_RULES: List[FieldRule] = [
    FieldRule(name="name", required=True, type=FieldType.STRING, min=2, max=50),
    FieldRule(name="department name", required=True, type=FieldType.STRING, min=2, max=50),
    FieldRule(name="email", required=False, type=FieldType.EMAIL),
]

EXAM_TEMPLATE_RULES: List[FieldRule] = [
    FieldRule(name="question", required=True, type=FieldType.STRING, min=5),
    FieldRule(name="type", required=True, type=FieldType.STRING, enum=QUESTION_TYPES),
    FieldRule(name="difficulty", required=True, type=FieldType.STRING, enum=DIFFICULTY_LEVELS),
    FieldRule(name="correct answer", required=True, type=FieldType.STRING),
    FieldRule(name="score", required=False, type=FieldType.NUMBER, min=1, max=100),
]

RULE_SETS: Dict[str, List[FieldRule]] = {
    "roster": ROSTER_RULES,
    "exam_template": EXAM_TEMPLATE_RULES,
}


def get_rule_set(name: str) -> List[FieldRule]:
    try:
        return RULE_SETS[name]
    except KeyError:
        raise UnknownRuleSetError(name) from None
