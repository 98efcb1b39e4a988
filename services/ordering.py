"""
Keeps order_idx consistent for sibling collections: sections in the outline
and questions inside one section.

Items can be model instances or plain dicts, anything with an id and an
order_idx. None of these functions touch the database, the store applies the
plan they return.
"""
from collections import namedtuple
from datetime import datetime

OrderUpdate = namedtuple('OrderUpdate', ['id', 'order_idx'])


def _field(item, name, default=None):
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _sort_key(item):
    # created_at then id break ties when two siblings ended up with the same order_idx
    created_at = _field(item, 'created_at') or datetime.min
    item_id = _field(item, 'id')
    return (_field(item, 'order_idx'), created_at, item_id if item_id is not None else 0)


def sort_siblings(items):
    """Return items in display order."""
    return sorted(items, key=_sort_key)


def next_append_index(items):
    """
    order_idx for a new item added at the end of the collection.

    max(order_idx) + 1, or 1 for an empty collection.
    """
    positions = [_field(item, 'order_idx') for item in items]
    positions = [position for position in positions if position is not None]

    if not positions:
        return 1

    return max(positions) + 1


def reorder(items, from_index, to_index):
    """
    Move the item at from_index to to_index and renumber every sibling.

    items has to be in display order already. The whole collection comes
    back as OrderUpdate(id, order_idx) with order_idx running 1..n, not just
    the moved item. Moving an item onto itself or using an index outside the
    list is a no-op and returns an empty list.
    """
    items = list(items)
    count = len(items)

    if from_index == to_index:
        return []
    if not (0 <= from_index < count) or not (0 <= to_index < count):
        return []

    moved = items.pop(from_index)
    items.insert(to_index, moved)

    return [OrderUpdate(_field(item, 'id'), position + 1) for position, item in enumerate(items)]


def apply_order(items, updates):
    """
    Return copies of dict items with the planned order_idx, sorted by it.

    Used for the optimistic view the store shows while the plan is being saved.
    """
    if not updates:
        return list(items)

    new_positions = {update.id: update.order_idx for update in updates}
    reordered = []

    for item in items:
        copy = dict(item)
        if copy['id'] in new_positions:
            copy['order_idx'] = new_positions[copy['id']]
        reordered.append(copy)

    return sort_siblings(reordered)
