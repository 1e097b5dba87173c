"""
dojo/skills/progress.py
Skill proficiency tracking and the dashboard summary.

Proficiency only ever moves up one rung per completed activity, and only
when the activity type and score match a row of TRANSITIONS.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from sqlalchemy.exc import IntegrityError

from dojo import db
from dojo.models import (Activity, ActivityType, ProficiencyLevel,
                         UserProfile, UserSkillProficiency)

LEVEL_ORDER: List[ProficiencyLevel] = list(ProficiencyLevel)

# (current level, activity type) -> (minimum score, next level)
TRANSITIONS: Dict[Tuple[ProficiencyLevel, ActivityType], Tuple[int, ProficiencyLevel]] = {
    (ProficiencyLevel.NOVICE,     ActivityType.LEARN_QUIZ):      (80, ProficiencyLevel.APPRENTICE),
    (ProficiencyLevel.NOVICE,     ActivityType.PRACTICE_DRILL):  (70, ProficiencyLevel.APPRENTICE),
    (ProficiencyLevel.APPRENTICE, ActivityType.PRACTICE_DRILL):  (90, ProficiencyLevel.JOURNEYMAN),
    (ProficiencyLevel.APPRENTICE, ActivityType.APPLY_CHALLENGE): (80, ProficiencyLevel.JOURNEYMAN),
    (ProficiencyLevel.JOURNEYMAN, ActivityType.ASSESS_TEST):     (90, ProficiencyLevel.MASTER),
}


def rank(level) -> int:
    """NOVICE=1 ... MASTER=4."""
    return LEVEL_ORDER.index(ProficiencyLevel(level)) + 1


def next_level(current, activity_type, score: int) -> ProficiencyLevel:
    """Level after one qualifying completion; unchanged when no row matches."""
    current = ProficiencyLevel(current)
    rule = TRANSITIONS.get((current, ActivityType(activity_type)))
    if rule and score >= rule[0]:
        return rule[1]
    return current


def _levels_below(level: ProficiencyLevel) -> List[ProficiencyLevel]:
    return LEVEL_ORDER[:rank(level) - 1]


def _raise_level(profile_id: int, skill_id: int, candidate: ProficiencyLevel) -> int:
    """
    Compare-and-set: a single UPDATE that only touches the row when the stored
    level ranks below `candidate`. Returns the number of rows changed.
    """
    lower = _levels_below(candidate)
    if not lower:
        return 0
    return (
        UserSkillProficiency.query
        .filter(
            UserSkillProficiency.profile_id == profile_id,
            UserSkillProficiency.skill_id == skill_id,
            UserSkillProficiency.proficiency_level.in_(lower),
        )
        .update({UserSkillProficiency.proficiency_level: candidate},
                synchronize_session='fetch')
    )


def advance_proficiency(user_id: int, activity_id: int, passed: bool, score: int) -> None:
    """
    Advance the user's proficiency for every skill tagged on the activity.

    No-op when the activity is missing or untagged, the user has no profile,
    or `passed` is False. Flushes but never commits; the caller owns the
    transaction. Storage errors propagate.
    """
    if not 0 <= score <= 100:
        raise ValueError(f"score must be between 0 and 100, got {score}")

    activity = db.session.get(Activity, activity_id)
    if activity is None or not activity.skills:
        return

    profile = UserProfile.query.filter_by(user_id=user_id).first()
    if profile is None or not passed:
        return

    current_levels = {
        p.skill_id: p.proficiency_level
        for p in UserSkillProficiency.query.filter_by(profile_id=profile.id).all()
    }

    for skill in activity.skills:
        stored = current_levels.get(skill.id)
        candidate = next_level(stored or ProficiencyLevel.NOVICE, activity.type, score)

        if stored is not None:
            if rank(candidate) > rank(stored):
                _raise_level(profile.id, skill.id, candidate)
            continue

        # First completion touching this skill: insert, but a concurrent
        # request may have inserted the row since we read.
        try:
            with db.session.begin_nested():
                db.session.add(UserSkillProficiency(
                    profile_id=profile.id,
                    skill_id=skill.id,
                    proficiency_level=candidate,
                ))
        except IntegrityError:
            _raise_level(profile.id, skill.id, candidate)

    db.session.flush()


def _empty_counts() -> Dict[str, int]:
    return {level.value: 0 for level in LEVEL_ORDER}


def summarize(user_id: int) -> Dict:
    """
    Aggregate a user's proficiencies for dashboards:
        totalSkills       : number of proficiency records
        proficiencyLevels : count per level (all four keys always present)
        skillsByCategory  : {category: [{name, proficiencyLevel}]} in record order
    A user without a profile gets the zero-valued summary.
    """
    profile = UserProfile.query.filter_by(user_id=user_id).first()
    if profile is None:
        return {
            "totalSkills": 0,
            "proficiencyLevels": _empty_counts(),
            "skillsByCategory": {},
        }

    records = (
        UserSkillProficiency.query
        .filter_by(profile_id=profile.id)
        .order_by(UserSkillProficiency.id.asc())
        .all()
    )

    counts = _empty_counts()
    by_category: Dict[str, List[Dict[str, str]]] = {}
    for rec in records:
        level = rec.proficiency_level.value
        counts[level] += 1
        by_category.setdefault(rec.skill.category, []).append({
            "name":             rec.skill.name,
            "proficiencyLevel": level,
        })

    return {
        "totalSkills": len(records),
        "proficiencyLevels": counts,
        "skillsByCategory": by_category,
    }
