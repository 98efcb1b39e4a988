import io

from flask import Blueprint, current_app, send_file

from services.outline_store import get_store
from utils.export import generate_excel, generate_markdown, generate_pdf

export_bp = Blueprint('export', __name__, url_prefix='/export')


def _filename(extension):
    safe_title = current_app.config['DOCUMENT_TITLE'].replace(' ', '_').replace('/', '_')
    return f'{safe_title}.{extension}'


@export_bp.route('/markdown')
def export_markdown():
    """Export the outline with its final answers as Markdown."""

    markdown = generate_markdown(get_store().export_snapshot(), current_app.config['DOCUMENT_TITLE'])

    return send_file(
        io.BytesIO(markdown.encode('utf-8')),
        mimetype='text/markdown',
        as_attachment=True,
        download_name=_filename('md'),
    )


@export_bp.route('/pdf')
def export_pdf():
    """Export the outline as a PDF report."""

    output = generate_pdf(get_store().export_snapshot(), current_app.config['DOCUMENT_TITLE'])

    return send_file(
        output,
        mimetype='application/pdf',
        as_attachment=True,
        download_name=_filename('pdf'),
    )


@export_bp.route('/excel')
def export_excel():
    """Export every question with its status and answer, one row each."""

    output = generate_excel(get_store().export_snapshot())

    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name=_filename('xlsx'),
    )
