from flask import jsonify, request, current_app
from flask_login import login_required

from dojo.book import book
from dojo.book.structure import (
    book_outline, get_chapter_by_id, get_section_by_id, get_concept_by_id
)
from dojo.book.explain import ExplanationUnavailable, generate_dynamic_content


@book.route("")
def outline():
    return jsonify({"chapters": book_outline()})


@book.route("/chapters/<chapter_id>")
def chapter(chapter_id):
    ch = get_chapter_by_id(chapter_id)
    if not ch:
        return jsonify({"error": "Chapter not found"}), 404
    return jsonify(ch)


@book.route("/sections/<section_id>")
def section(section_id):
    sec = get_section_by_id(section_id)
    if not sec:
        return jsonify({"error": "Section not found"}), 404
    return jsonify(sec)


@book.route("/concepts/<concept_id>")
def concept(concept_id):
    con = get_concept_by_id(concept_id)
    if not con:
        return jsonify({"error": "Concept not found"}), 404
    return jsonify(con)


@book.route("/concepts/<concept_id>/explain", methods=["POST"])
@login_required
def explain(concept_id):
    """Body: {"contentType": "explanation", "context"?: str, "question"?: str}"""
    con = get_concept_by_id(concept_id)
    if not con:
        return jsonify({"error": "Concept not found"}), 404

    data = request.get_json(silent=True) or {}
    content_type = data.get("contentType", "explanation")

    try:
        result = generate_dynamic_content(
            con["name"], content_type,
            context=data.get("context") or con["description"],
            question=data.get("question"),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except ExplanationUnavailable as e:
        return jsonify({"error": str(e)}), 503
    except Exception as e:
        current_app.logger.error("Explanation failed for %s: %s", concept_id, e)
        return jsonify({"error": "Failed to generate content"}), 502

    return jsonify(result)
