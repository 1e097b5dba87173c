from __future__ import annotations

from flask import jsonify, request, abort, current_app
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from dojo import db
from dojo.models import Module, Activity
from dojo.learn import learn
from dojo.learn.content import parse_content
from dojo.learn.grading import grade_submission
from dojo.learn.utils import (
    _get_or_create_profile, _xp_for_attempt,
    _award_xp, _record_attempt
)
from dojo.skills.progress import advance_proficiency
from dojo.book.generator import (
    generate_all_modules, get_module_by_id, get_activity_by_id
)


# ── Serializers ─────────────────────────────────────────────────────────────

def _activity_dict(act: Activity, with_content: bool = False) -> dict:
    data = {
        "id":          act.id,
        "title":       act.title,
        "description": act.description,
        "type":        act.type.value,
        "moduleId":    act.module_id,
        "order":       act.order,
        "xpReward":    act.xp_reward,
        "skills":      [s.to_dict() for s in act.skills],
    }
    if with_content:
        data["content"] = act.payload.public_dict()
    return data


def _generated_activity_dict(act: dict, with_content: bool = False) -> dict:
    data = {k: v for k, v in act.items() if k != "content"}
    if with_content:
        data["content"] = parse_content(act["type"], act["content"]).public_dict()
    return data


def _module_dict(mod: Module) -> dict:
    return {
        "id":            mod.id,
        "title":         mod.title,
        "description":   mod.description,
        "order":         mod.order,
        "activityCount": len(mod.activities),
    }


def _generated_summaries() -> list:
    return [
        {
            "id":            m["id"],
            "title":         m["title"],
            "description":   m["description"],
            "level":         m["level"],
            "order":         m["order"],
            "activityCount": len(m["activities"]),
            "generated":     True,
        }
        for m in generate_all_modules()
    ]


def _as_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


# ── Routes ──────────────────────────────────────────────────────────────────
@learn.route("/modules")
@login_required
def modules():
    if request.args.get("generated") == "true":
        return jsonify({"modules": _generated_summaries()})

    rows = Module.query.order_by(Module.order.asc()).all()
    if not rows:
        return jsonify({"modules": _generated_summaries()})
    return jsonify({"modules": [_module_dict(m) for m in rows]})


@learn.route("/modules/<module_id>")
@login_required
def module_detail(module_id):
    if module_id.startswith("module-"):
        mod = get_module_by_id(module_id)
        if not mod:
            abort(404)
        return jsonify({
            **{k: v for k, v in mod.items() if k != "activities"},
            "activities": [_generated_activity_dict(a) for a in mod["activities"]],
            "progress":   {},
            "generated":  True,
        })

    pk = _as_int(module_id)
    mod = db.session.get(Module, pk) if pk is not None else None
    if not mod:
        abort(404)

    profile = _get_or_create_profile(current_user.id)
    activity_ids = {a.id for a in mod.activities}
    progress = {
        p.activity_id: p.to_dict()
        for p in profile.activity_progress
        if p.activity_id in activity_ids
    }

    skills = {}
    for act in mod.activities:
        for skill in act.skills:
            skills[skill.id] = skill.to_dict()

    return jsonify({
        **_module_dict(mod),
        "activities": [_activity_dict(a) for a in mod.activities],
        "skills":     list(skills.values()),
        "progress":   progress,
    })


@learn.route("/activities/<activity_id>")
@login_required
def activity_detail(activity_id):
    pk = _as_int(activity_id)
    if request.args.get("generated") == "true" or pk is None:
        act = get_activity_by_id(activity_id)
        if not act:
            abort(404)
        return jsonify(_generated_activity_dict(act, with_content=True))

    act = db.session.get(Activity, pk)
    if not act:
        abort(404)
    return jsonify(_activity_dict(act, with_content=True))


@learn.route("/activities/<int:activity_id>/submit", methods=["POST"])
@login_required
def submit_activity(activity_id):
    """
    Grade a submission, then award xp, record the attempt and advance
    proficiency in one transaction.
    """
    act = db.session.get(Activity, activity_id)
    if not act:
        return jsonify({"error": "Activity not found"}), 404

    data = request.get_json(silent=True) or {}
    submission = data.get("submission")
    if submission is None:
        return jsonify({"error": "Missing submission"}), 400

    try:
        result = grade_submission(act.type, submission, act.content or {})
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    xp_gained = _xp_for_attempt(act.xp_reward, result.passed)

    try:
        profile = _get_or_create_profile(current_user.id)
        _award_xp(profile, xp_gained)
        _record_attempt(profile, act.id, result.score, result.passed)
        if result.passed:
            advance_proficiency(current_user.id, act.id, True, result.score)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error submitting activity %s: %s", activity_id, e)
        return jsonify({"error": "Failed to submit activity"}), 500

    return jsonify({
        "success":  True,
        "result":   result.to_dict(),
        "xpGained": xp_gained,
        "newLevel": profile.level,
        "newXp":    profile.xp,
    })
