from flask import jsonify, Blueprint
from flask_login import login_required, current_user

from dojo.models import Module
from dojo.learn.utils import _get_or_create_profile, _completed_activity_ids
from dojo.skills.progress import summarize

main = Blueprint('main', __name__)


def _profile_dict(profile):
    return {
        "level":         profile.level,
        "xp":            profile.xp,
        "currentModule": (
            {"id": profile.current_module.id, "title": profile.current_module.title}
            if profile.current_module else None
        ),
    }


@main.route("/")
@main.route("/home")
def home():
    return jsonify({"name": "Data Analysis Dojo", "status": "ok"})


@main.route("/dashboard")
@login_required
def dashboard():
    profile = _get_or_create_profile(current_user.id)
    completed = _completed_activity_ids(profile.id)

    modules = []
    for mod in Module.query.order_by(Module.order.asc()).all():
        total = len(mod.activities)
        done = sum(1 for a in mod.activities if a.id in completed)
        modules.append({
            "id":        mod.id,
            "title":     mod.title,
            "order":     mod.order,
            "total":     total,
            "completed": done,
            "pct":       int((done / total) * 100) if total else 0,
        })

    return jsonify({
        "user":    {"username": current_user.username, "email": current_user.email},
        "profile": _profile_dict(profile),
        "skills":  summarize(current_user.id),
        "modules": modules,
    })


@main.route("/profile")
@login_required
def profile():
    prof = _get_or_create_profile(current_user.id)
    return jsonify({
        **_profile_dict(prof),
        "proficiencies": [
            {
                "skill":            p.skill.to_dict(),
                "proficiencyLevel": p.proficiency_level.value,
            }
            for p in prof.proficiencies
        ],
    })
