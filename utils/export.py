"""
Render an outline snapshot (OutlineStore.export_snapshot) as Markdown, PDF or Excel.

Sections and questions arrive already sorted by order_idx, these functions
only format what they are given.
"""
import io
import json
from datetime import datetime

from utils.rich_text import to_markdown, to_plain_text

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.webp', '.svg')


def answer_to_markdown(answer):
    content_type = answer.get('content_type') or 'text'

    if content_type == 'chart':
        config = answer.get('chart_config') or {}
        title = config.get('title') or config.get('type') or 'Chart'
        return f"**Chart: {title}**\n\n```json\n{json.dumps(config, indent=2, sort_keys=True)}\n```"

    if content_type == 'media':
        lines = []
        for url in answer.get('media_urls') or []:
            if url.lower().endswith(IMAGE_EXTENSIONS):
                lines.append(f'![]({url})')
            else:
                lines.append(f'- [{url}]({url})')
        return '\n'.join(lines)

    if content_type == 'interactive':
        data = answer.get('interactive_data') or {}
        return f"```json\n{json.dumps(data, indent=2, sort_keys=True)}\n```"

    return to_markdown(answer.get('content'))


def answer_to_text(answer):
    """One line or paragraph of text for the PDF and Excel exports."""
    if not answer:
        return ''

    content_type = answer.get('content_type') or 'text'

    if content_type == 'chart':
        config = answer.get('chart_config') or {}
        return f"[Chart] {config.get('title') or config.get('type') or ''}".strip()
    if content_type == 'media':
        return '\n'.join(answer.get('media_urls') or [])
    if content_type == 'interactive':
        return json.dumps(answer.get('interactive_data') or {}, sort_keys=True)

    return to_plain_text(answer.get('content'))


def generate_markdown(snapshot, title, generated_at=None):
    """Only final answers make it into the document, drafts show as missing."""
    generated_at = generated_at or datetime.utcnow()

    lines = [f'# {title} Export', '', f'Generated on: {generated_at.isoformat()}', '']

    progress = snapshot['progress']
    lines += [
        f'Progress: {progress.final} final, {progress.draft} draft, '
        f'{progress.unanswered} unanswered ({progress.percent}% complete)',
        '',
    ]

    for section in snapshot['sections']:
        lines += [f"## {section['title']}", '']
        if section.get('description'):
            lines += [section['description'], '']

        for question in section['questions']:
            lines += [f"### {question['prompt']}", '']

            answer = question.get('answer')
            if answer and answer.get('status') == 'final':
                lines += [answer_to_markdown(answer), '']
                if answer.get('updated_at'):
                    lines += [f"*Last updated: {answer['updated_at'].strftime('%Y-%m-%d')}*", '']
            else:
                lines += ['*No final answer provided.*', '']

    return '\n'.join(lines)


def _escape(text):
    # reportlab paragraphs are mini html
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;').replace('\n', '<br/>')


def generate_pdf(snapshot, title):
    """Build the PDF report and return it as a BytesIO ready for send_file."""
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.lib.units import cm
    from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer

    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=A4,
        leftMargin=2 * cm,
        rightMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title=title,
    )

    styles = getSampleStyleSheet()

    style_title = ParagraphStyle(
        'DocumentTitle',
        parent=styles['Title'],
        fontSize=20,
        textColor=colors.HexColor('#1B3A5C'),
        spaceAfter=6,
    )
    style_subtitle = ParagraphStyle(
        'Subtitle',
        parent=styles['Normal'],
        fontSize=11,
        textColor=colors.HexColor('#555555'),
        spaceAfter=16,
    )
    style_section = ParagraphStyle(
        'SectionTitle',
        parent=styles['Heading1'],
        fontSize=14,
        textColor=colors.HexColor('#1B3A5C'),
        spaceBefore=18,
        spaceAfter=6,
    )
    style_description = ParagraphStyle(
        'SectionDescription',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.HexColor('#555555'),
        spaceAfter=6,
    )
    style_question = ParagraphStyle(
        'QuestionText',
        parent=styles['Normal'],
        fontSize=11,
        textColor=colors.HexColor('#2C3E50'),
        fontName='Helvetica-Bold',
        spaceBefore=10,
        spaceAfter=3,
    )
    style_answer = ParagraphStyle(
        'AnswerText',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.HexColor('#333333'),
        spaceAfter=4,
        leftIndent=12,
    )
    style_missing = ParagraphStyle(
        'MissingAnswer',
        parent=style_answer,
        textColor=colors.HexColor('#999999'),
        fontName='Helvetica-Oblique',
    )

    progress = snapshot['progress']
    story = [
        Paragraph(_escape(title), style_title),
        Paragraph(
            f"Final: {progress.final} &nbsp;&nbsp;|&nbsp;&nbsp; Draft: {progress.draft} "
            f"&nbsp;&nbsp;|&nbsp;&nbsp; Unanswered: {progress.unanswered} "
            f"&nbsp;&nbsp;|&nbsp;&nbsp; {progress.percent}% complete",
            style_subtitle,
        ),
        HRFlowable(width='100%', thickness=1, color=colors.HexColor('#DDDDDD'), spaceAfter=10),
    ]

    for section_number, section in enumerate(snapshot['sections'], start=1):
        story.append(Paragraph(f"{section_number}. {_escape(section['title'])}", style_section))
        if section.get('description'):
            story.append(Paragraph(_escape(section['description']), style_description))

        for question_number, question in enumerate(section['questions'], start=1):
            story.append(Paragraph(
                f"{section_number}.{question_number} {_escape(question['prompt'])}",
                style_question,
            ))

            answer = question.get('answer')
            if answer and answer.get('status') == 'final':
                story.append(Paragraph(_escape(answer_to_text(answer)), style_answer))
            else:
                story.append(Paragraph('No final answer provided.', style_missing))
            story.append(Spacer(1, 6))

    doc.build(story)
    output.seek(0)
    return output


def generate_excel(snapshot):
    """One row per question with its status and answer text."""
    import openpyxl
    from openpyxl.styles import Alignment, Font, PatternFill

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Outline'

    headers = ['Section #', 'Section', 'Q#', 'Question', 'Status', 'Content Type', 'Answer']
    ws.append(headers)

    header_fill = PatternFill(start_color='1B3A5C', end_color='1B3A5C', fill_type='solid')
    header_font = Font(bold=True, color='FFFFFF')
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)

    for section in snapshot['sections']:
        for question in section['questions']:
            answer = question.get('answer')
            ws.append([
                section['order_idx'],
                section['title'],
                question['order_idx'],
                question['prompt'],
                answer['status'] if answer else 'unanswered',
                answer['content_type'] if answer else '',
                answer_to_text(answer),
            ])

    col_widths = [10, 30, 6, 60, 12, 14, 80]
    for i, width in enumerate(col_widths, start=1):
        ws.column_dimensions[openpyxl.utils.get_column_letter(i)].width = width

    for row in ws.iter_rows(min_row=2):
        row[3].alignment = Alignment(wrap_text=True, vertical='top')  # Question
        row[6].alignment = Alignment(wrap_text=True, vertical='top')  # Answer

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output
