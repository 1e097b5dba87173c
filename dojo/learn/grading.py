"""
dojo/learn/grading.py
Scores a submission against an activity's typed content.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from dojo.models import ActivityType
from dojo.learn.content import (
    QuizContent, DrillContent, ChallengeContent, AssessmentContent, parse_content
)
from dojo.learn.utils import _execute_code, _check_solution

PASS_SCORE = {
    ActivityType.LEARN_QUIZ:      70,
    ActivityType.PRACTICE_DRILL:  70,
    ActivityType.APPLY_CHALLENGE: 70,
    ActivityType.ASSESS_TEST:     80,
}


@dataclass
class GradingResult:
    passed: bool
    score: int
    feedback: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def grade_quiz(answers: Dict[str, str], content: QuizContent) -> GradingResult:
    key = content.correct_answers
    total = len(key)
    if not total:
        return GradingResult(False, 0, "This quiz has no questions.", {"tests": []})

    tests = []
    correct = 0
    for qid, right in key.items():
        chosen = str(answers.get(qid, ""))
        ok = chosen == right
        correct += ok
        tests.append({
            "name":    f"Question {qid}",
            "passed":  ok,
            "message": "Correct" if ok else "Incorrect",
        })

    score = round(correct / total * 100)
    return GradingResult(
        passed=score >= PASS_SCORE[ActivityType.LEARN_QUIZ],
        score=score,
        feedback=f"You got {correct} out of {total} questions correct.",
        details={"tests": tests},
    )


def _grade_code(code: str, checks: List[Dict[str, str]], threshold: int) -> GradingResult:
    """
    Run `code` once per check (each with its own stdin) and look for the
    expected text in the output. No checks: a clean exit is full marks.
    """
    if not code.strip():
        return GradingResult(False, 0, "Submit some code first.", {"tests": []})

    if not checks:
        result = _execute_code(code)
        ok = not result["error"]
        return GradingResult(
            passed=ok,
            score=100 if ok else 0,
            feedback="Your code ran successfully." if ok else "Your code raised an error.",
            details={"output": result["stdout"], "error": result["error"]},
        )

    tests = []
    output = ""
    for i, check in enumerate(checks, start=1):
        result = _execute_code(code, check.get("input", ""))
        output = result["stdout"]
        if result["error"]:
            lines = result["error"].strip().splitlines()
            ok, message = False, lines[-1] if lines else "Execution failed"
        else:
            ok = _check_solution(result["stdout"] + result["stderr"], check["expected"])
            message = "Output matched" if ok else f"Expected to see: {check['expected']}"
        tests.append({
            "name":    check.get("description") or f"Test {i}",
            "passed":  ok,
            "message": message,
        })

    passed_count = sum(1 for t in tests if t["passed"])
    score = round(passed_count / len(tests) * 100)
    return GradingResult(
        passed=score >= threshold,
        score=score,
        feedback=f"{passed_count} of {len(tests)} checks passed.",
        details={"tests": tests, "output": output},
    )


def _case_checks(content: DrillContent | AssessmentContent) -> List[Dict[str, str]]:
    return [
        {"input": c.input, "expected": c.expected_output, "description": c.description}
        for c in content.test_cases
        if c.expected_output
    ]


def grade_submission(activity_type, submission: Any, content) -> GradingResult:
    """
    Grade `submission` for an activity of `activity_type`.
    `content` may be the typed payload or the raw JSON dict.
    Raises ValueError for unknown types or malformed submissions.
    """
    try:
        kind = ActivityType(activity_type)
    except ValueError:
        raise ValueError(f"Unsupported activity type: {activity_type}") from None
    if not isinstance(content, (QuizContent, DrillContent, ChallengeContent, AssessmentContent)):
        content = parse_content(kind, content)

    if kind == ActivityType.LEARN_QUIZ:
        answers = submission.get("answers") if isinstance(submission, dict) else None
        if not isinstance(answers, dict):
            raise ValueError("Quiz submissions need an 'answers' mapping")
        return grade_quiz({str(k): v for k, v in answers.items()}, content)

    code = submission.get("code") if isinstance(submission, dict) else submission
    if not isinstance(code, str):
        raise ValueError("Code submissions need a 'code' string")

    if kind == ActivityType.PRACTICE_DRILL:
        return _grade_code(code, _case_checks(content), PASS_SCORE[kind])

    if kind == ActivityType.APPLY_CHALLENGE:
        checks = [{"input": "", "expected": e} for e in content.expected_outputs if e]
        return _grade_code(code, checks, PASS_SCORE[kind])

    return _grade_code(code, _case_checks(content), PASS_SCORE[kind])
