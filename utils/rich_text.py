"""
Turn rich text answers into Markdown or plain text.

The editor saves a JSON document of nested nodes:
{'type': 'doc', 'content': [{'type': 'paragraph', 'content': [{'type': 'text', 'text': 'hi'}]}]}

Plain strings are passed through untouched.
"""

MARK_WRAPPERS = {
    'bold': '**{}**',
    'italic': '*{}*',
    'code': '`{}`',
    'strike': '~~{}~~',
}


def _children(node):
    return node.get('content') or []


def _text_with_marks(node):
    text = node.get('text', '')

    for mark in node.get('marks') or []:
        mark_type = mark.get('type')
        if mark_type == 'link':
            href = (mark.get('attrs') or {}).get('href', '')
            text = f'[{text}]({href})'
        elif mark_type in MARK_WRAPPERS:
            text = MARK_WRAPPERS[mark_type].format(text)

    return text


def _markdown(node):
    if not isinstance(node, dict):
        return ''

    node_type = node.get('type')
    children = _children(node)

    if node_type == 'doc':
        return '\n\n'.join(_markdown(child) for child in children)

    if node_type == 'text':
        return _text_with_marks(node)

    if node_type == 'hardBreak':
        return '\n'

    if node_type == 'heading':
        level = (node.get('attrs') or {}).get('level', 1)
        return '#' * level + ' ' + ''.join(_markdown(child) for child in children)

    if node_type == 'bulletList':
        return '\n'.join(f'- {_markdown(item)}' for item in children)

    if node_type == 'orderedList':
        return '\n'.join(f'{number}. {_markdown(item)}' for number, item in enumerate(children, start=1))

    if node_type == 'blockquote':
        quote = '\n'.join(_markdown(child) for child in children)
        return '\n'.join(f'> {line}' for line in quote.split('\n'))

    if node_type == 'codeBlock':
        language = (node.get('attrs') or {}).get('language') or ''
        code = ''.join(_markdown(child) for child in children)
        return f'```{language}\n{code}\n```'

    # paragraph, listItem and anything unknown just join their children
    return ''.join(_markdown(child) for child in children)


def to_markdown(content):
    if content is None:
        return ''
    if isinstance(content, str):
        return content
    return _markdown(content)


def _plain(node):
    if not isinstance(node, dict):
        return ''

    node_type = node.get('type')
    children = _children(node)

    if node_type == 'text':
        return node.get('text', '')
    if node_type == 'hardBreak':
        return '\n'
    if node_type == 'doc':
        return '\n\n'.join(_plain(child) for child in children)
    if node_type == 'bulletList':
        return '\n'.join(f'• {_plain(item)}' for item in children)
    if node_type == 'orderedList':
        return '\n'.join(f'{number}. {_plain(item)}' for number, item in enumerate(children, start=1))

    return ''.join(_plain(child) for child in children)


def to_plain_text(content):
    """Text only, used for length checks and the PDF / Excel exports."""
    if content is None:
        return ''
    if isinstance(content, str):
        return content
    return _plain(content)
