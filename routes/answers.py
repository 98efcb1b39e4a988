from flask import Blueprint, jsonify, request

from routes.auth import current_user_email
from services.errors import ValidationError
from services.outline_store import get_store

answers_bp = Blueprint('answers', __name__, url_prefix='/api/questions')


@answers_bp.route('/<int:question_id>/answer', methods=['GET'])
def get_answer(question_id):
    """The answer, or null when the question has not been answered."""
    return jsonify({'answer': get_store().get_answer(question_id)})


@answers_bp.route('/<int:question_id>/answer', methods=['PUT'])
def save_answer(question_id):
    """
    Create or replace the answer.

    Body: {"status": "draft"|"final", "content_type": "text"|"chart"|"media"|"interactive",
           plus the payload field for that type}
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')

    answer = get_store().upsert_answer(
        question_id,
        status=body.get('status'),
        content_type=body.get('content_type'),
        data=body,
        changed_by=current_user_email(),
    )
    return jsonify({'answer': answer})


@answers_bp.route('/<int:question_id>/answer/status', methods=['PATCH'])
def set_status(question_id):
    body = request.get_json(silent=True) or {}
    answer = get_store().set_answer_status(question_id, body.get('status'), changed_by=current_user_email())
    return jsonify({'answer': answer})


@answers_bp.route('/<int:question_id>/answer', methods=['DELETE'])
def delete_answer(question_id):
    deleted = get_store().delete_answer(question_id, changed_by=current_user_email())
    return jsonify({'deleted': deleted})


@answers_bp.route('/<int:question_id>/history', methods=['GET'])
def history(question_id):
    limit = request.args.get('limit', type=int)
    return jsonify({'history': get_store().get_answer_history(question_id, limit=limit)})
