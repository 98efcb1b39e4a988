import pandas as pd


def process_excel_file(file_path):
    """
    Read an Excel file and turn it into an outline to import.

    The sheet needs a 'Section' column and a 'Question' column, a
    'Description' column is optional. Rows that share a section title are
    grouped together, sections and questions keep the order they appear in.
    If there are no such headers the first two columns are used.

    Parameters:
        file_path: Path to the Excel file

    Returns:
        {'sections': [{'title', 'description', 'questions': [...]}]}
    """
    # Read the Excel file
    excel_data = pd.read_excel(file_path)

    columns = {str(column).strip().lower(): column for column in excel_data.columns}
    section_column = columns.get('section', excel_data.columns[0])
    question_column = columns.get('question')
    if question_column is None:
        question_column = excel_data.columns[1] if len(excel_data.columns) > 1 else None
    description_column = columns.get('description')

    if question_column is None:
        return {'sections': []}

    sections = []
    sections_by_title = {}

    for row_index, row_data in excel_data.iterrows():
        # Skip empty rows
        if pd.isna(row_data[section_column]) or pd.isna(row_data[question_column]):
            continue

        section_title = str(row_data[section_column]).strip()
        question_text = str(row_data[question_column]).strip()

        if section_title == '' or question_text == '':
            continue

        section = sections_by_title.get(section_title)
        if section is None:
            section = {'title': section_title, 'description': None, 'questions': []}
            sections_by_title[section_title] = section
            sections.append(section)

        # first description we see for a section wins
        if description_column is not None and section['description'] is None:
            description = row_data[description_column]
            if not pd.isna(description) and str(description).strip():
                section['description'] = str(description).strip()

        section['questions'].append(question_text)

    return {'sections': sections}


def check_if_excel_file(filename, allowed_types=('xlsx',)):
    """
    Check if a file is an Excel file we can read.

    Parameters:
        filename: Name of the file
        allowed_types: extensions that are accepted

    Returns:
        True if Excel file, False otherwise
    """
    # Check if filename has a dot
    if not filename or '.' not in filename:
        return False

    # Get the file extension
    file_extension = filename.rsplit('.', 1)[1].lower()

    return file_extension in set(allowed_types)
