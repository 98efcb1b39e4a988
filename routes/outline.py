import os

from flask import Blueprint, current_app, jsonify, request
from werkzeug.utils import secure_filename

from services.errors import ValidationError
from services.outline_store import get_store
from services.progress import section_progress
from utils.excel_upload import check_if_excel_file, process_excel_file

"""
JSON api for the outline: sections, questions, ordering, progress and import.
every route goes through the outline store so the cache stays in step
"""
outline_bp = Blueprint('outline', __name__, url_prefix='/api')


def _json_body():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


def _with_progress(section):
    section['progress'] = section_progress(section['questions']).to_dict()
    return section


# sections

@outline_bp.route('/sections', methods=['GET'])
def list_sections():
    """All sections in order with their questions, answers and progress."""
    sections = [_with_progress(section) for section in get_store().list_sections()]
    return jsonify({'sections': sections})


@outline_bp.route('/sections', methods=['POST'])
def create_section():
    body = _json_body()
    section = get_store().create_section(body.get('title'), body.get('description'))
    return jsonify(section), 201


@outline_bp.route('/sections/<int:section_id>', methods=['GET'])
def get_section(section_id):
    return jsonify(_with_progress(get_store().get_section(section_id)))


@outline_bp.route('/sections/<int:section_id>', methods=['PATCH'])
def update_section(section_id):
    body = _json_body()
    changes = {field: body[field] for field in ('title', 'description') if field in body}
    return jsonify(get_store().update_section(section_id, **changes))


@outline_bp.route('/sections/<int:section_id>', methods=['DELETE'])
def delete_section(section_id):
    get_store().delete_section(section_id)
    return '', 204


@outline_bp.route('/sections/reorder', methods=['POST'])
def reorder_sections():
    """Drag and drop result: move the section at from_index to to_index."""
    body = _json_body()
    plan = get_store().reorder_sections(body.get('from_index'), body.get('to_index'))
    return jsonify({'updates': [update._asdict() for update in plan]})


# questions

@outline_bp.route('/sections/<int:section_id>/questions', methods=['POST'])
def create_question(section_id):
    body = _json_body()
    question = get_store().create_question(section_id, body.get('prompt'))
    return jsonify(question), 201


@outline_bp.route('/sections/<int:section_id>/questions/reorder', methods=['POST'])
def reorder_questions(section_id):
    body = _json_body()
    plan = get_store().reorder_questions(section_id, body.get('from_index'), body.get('to_index'))
    return jsonify({'updates': [update._asdict() for update in plan]})


@outline_bp.route('/questions/<int:question_id>', methods=['PATCH'])
def update_question(question_id):
    body = _json_body()
    return jsonify(get_store().update_question(question_id, body.get('prompt')))


@outline_bp.route('/questions/<int:question_id>', methods=['DELETE'])
def delete_question(question_id):
    get_store().delete_question(question_id)
    return '', 204


# progress

@outline_bp.route('/sections/<int:section_id>/progress', methods=['GET'])
def section_progress_view(section_id):
    progress = get_store().get_section_progress(section_id)
    return jsonify(dict(progress.to_dict(), section_id=section_id))


@outline_bp.route('/progress', methods=['GET'])
def document_progress_view():
    return jsonify(get_store().get_document_progress().to_dict())


# import and json export

@outline_bp.route('/outline.json', methods=['GET'])
def outline_json():
    """Current outline in the same format the import takes."""
    return jsonify(get_store().outline_json())


@outline_bp.route('/import/json', methods=['POST'])
def import_json():
    result = get_store().import_outline(_json_body())
    return jsonify(result), 201


@outline_bp.route('/import/excel', methods=['POST'])
def import_excel():
    """Upload an Excel sheet of Section / Question rows and append it to the outline."""

    if 'file' not in request.files:
        raise ValidationError('No file uploaded')

    uploaded_file = request.files['file']

    if uploaded_file.filename == '':
        raise ValidationError('No file selected')

    allowed_types = current_app.config['ALLOWED_FILE_TYPES']
    if not check_if_excel_file(uploaded_file.filename, allowed_types):
        raise ValidationError(f"Invalid file type. Please upload {', '.join('.' + t for t in allowed_types)}")

    upload_folder = current_app.config['UPLOAD_FOLDER']
    if not os.path.exists(upload_folder):
        os.makedirs(upload_folder)

    temp_file_path = os.path.join(upload_folder, secure_filename(uploaded_file.filename))
    uploaded_file.save(temp_file_path)

    try:
        outline = process_excel_file(temp_file_path)
    except Exception as error:
        current_app.logger.warning('could not read %s: %s', uploaded_file.filename, error)
        raise ValidationError('Could not read the Excel file') from error
    finally:
        os.remove(temp_file_path)

    if not outline['sections']:
        raise ValidationError('No questions found in Excel file')

    result = get_store().import_outline(outline)
    return jsonify(result), 201
