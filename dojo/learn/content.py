"""
dojo/learn/content.py
Typed payloads for Activity.content, one dataclass per activity type.

The JSON column keeps whatever shape an author saved; these classes are the
only way the rest of the app reads it.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from dojo.models import ActivityType


@dataclass
class QuizQuestion:
    id: str
    text: str
    options: List[Dict[str, str]] = field(default_factory=list)
    explanation: str = ""


@dataclass
class CodeTestCase:
    input: str = ""
    expected_output: str = ""
    description: str = ""


@dataclass
class ChallengeStep:
    id: str
    title: str = ""
    instructions: str = ""
    initial_code: str = ""


@dataclass
class QuizContent:
    instructions: str = ""
    questions: List[QuizQuestion] = field(default_factory=list)
    correct_answers: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def public_dict(self) -> Dict[str, Any]:
        """Same as to_dict() minus the answer key."""
        data = self.to_dict()
        data.pop("correct_answers")
        return data


@dataclass
class DrillContent:
    instructions: str = ""
    initial_code: str = ""
    solution: str = ""
    test_cases: List[CodeTestCase] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def public_dict(self) -> Dict[str, Any]:
        data = self.to_dict()
        data.pop("solution")
        return data


@dataclass
class ChallengeContent:
    instructions: str = ""
    steps: List[ChallengeStep] = field(default_factory=list)
    initial_code: str = ""
    solution: str = ""
    expected_outputs: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def public_dict(self) -> Dict[str, Any]:
        data = self.to_dict()
        data.pop("solution")
        return data


@dataclass
class AssessmentContent:
    instructions: str = ""
    initial_code: str = ""
    solution: str = ""
    test_cases: List[CodeTestCase] = field(default_factory=list)
    assessment_criteria: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def public_dict(self) -> Dict[str, Any]:
        data = self.to_dict()
        data.pop("solution")
        return data


# ── Parsing ───────────────────────────────────────────────────────────────────
# Accepts both snake_case and the camelCase keys older seed data used.

def _get(raw: Dict, key: str, camel: str | None = None, default=None):
    if key in raw:
        return raw[key]
    if camel and camel in raw:
        return raw[camel]
    return default


def _test_cases(raw_cases) -> List[CodeTestCase]:
    cases = []
    for c in raw_cases or []:
        cases.append(CodeTestCase(
            input=str(_get(c, "input", default="")),
            expected_output=str(_get(c, "expected_output", "expectedOutput", "")),
            description=_get(c, "description", default=""),
        ))
    return cases


def _quiz(raw: Dict) -> QuizContent:
    questions = []
    for i, q in enumerate(_get(raw, "questions", default=[]) or [], start=1):
        questions.append(QuizQuestion(
            id=str(q.get("id", i)),
            text=q.get("text") or q.get("question", ""),
            options=list(q.get("options", [])),
            explanation=q.get("explanation", ""),
        ))
    answers = _get(raw, "correct_answers", "correctAnswers", {}) or {}
    return QuizContent(
        instructions=_get(raw, "instructions", default=""),
        questions=questions,
        correct_answers={str(k): str(v) for k, v in answers.items()},
    )


def _drill(raw: Dict) -> DrillContent:
    return DrillContent(
        instructions=_get(raw, "instructions", default=""),
        initial_code=_get(raw, "initial_code", "initialCode", ""),
        solution=_get(raw, "solution", default=""),
        test_cases=_test_cases(_get(raw, "test_cases", "testCases", [])),
    )


def _challenge(raw: Dict) -> ChallengeContent:
    steps = [
        ChallengeStep(
            id=str(s.get("id", i)),
            title=s.get("title", ""),
            instructions=s.get("instructions", ""),
            initial_code=_get(s, "initial_code", "initialCode", ""),
        )
        for i, s in enumerate(_get(raw, "steps", default=[]) or [], start=1)
    ]
    expected = _get(raw, "expected_outputs", "expectedOutputs", []) or []
    if isinstance(expected, (str, int, float)):
        expected = [expected]
    return ChallengeContent(
        instructions=_get(raw, "instructions", default=""),
        steps=steps,
        initial_code=_get(raw, "initial_code", "initialCode", ""),
        solution=_get(raw, "solution", default=""),
        expected_outputs=[str(e) for e in expected],
    )


def _assessment(raw: Dict) -> AssessmentContent:
    criteria = _get(raw, "assessment_criteria", "assessmentCriteria", []) or []
    return AssessmentContent(
        instructions=_get(raw, "instructions", default=""),
        initial_code=_get(raw, "initial_code", "initialCode", ""),
        solution=_get(raw, "solution", default=""),
        test_cases=_test_cases(_get(raw, "test_cases", "testCases", [])),
        assessment_criteria=[str(c) for c in criteria],
    )


_PARSERS = {
    ActivityType.LEARN_QUIZ:      _quiz,
    ActivityType.PRACTICE_DRILL:  _drill,
    ActivityType.APPLY_CHALLENGE: _challenge,
    ActivityType.ASSESS_TEST:     _assessment,
}


def parse_content(activity_type, raw: Dict | None):
    """Build the typed payload for `activity_type`. Raises ValueError on unknown types."""
    try:
        kind = ActivityType(activity_type)
    except ValueError:
        raise ValueError(f"Unsupported activity type: {activity_type}") from None
    return _PARSERS[kind](raw or {})
