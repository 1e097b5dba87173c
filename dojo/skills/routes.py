from flask import jsonify, request
from flask_login import login_required, current_user

from dojo.models import Skill
from dojo.skills import skills
from dojo.skills.progress import summarize
from dojo.book.generator import get_all_skills


@skills.route("/skills")
@login_required
def skill_list():
    if request.args.get("generated") == "true":
        return jsonify({"skills": get_all_skills()})

    rows = Skill.query.order_by(Skill.category.asc(), Skill.name.asc()).all()
    if not rows:
        return jsonify({"skills": get_all_skills()})
    return jsonify({"skills": [s.to_dict() for s in rows]})


@skills.route("/skills/summary")
@login_required
def skill_summary():
    return jsonify(summarize(current_user.id))
