from flask import Blueprint

book = Blueprint('book', __name__)

from dojo.book import routes  # noqa: E402,F401
