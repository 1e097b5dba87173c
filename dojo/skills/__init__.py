from flask import Blueprint

skills = Blueprint('skills', __name__)

from dojo.skills import routes  # noqa: E402,F401
