"""Unit tests for the query cache."""
import pytest

from services.cache import QueryCache


def test_get_when_missing_then_loads_once():
    cache = QueryCache()
    calls = []

    def loader():
        calls.append(1)
        return ['a']

    assert cache.get(('outline',), loader) == ['a']
    assert cache.get(('outline',), loader) == ['a']
    assert len(calls) == 1


def test_get_when_loader_raises_then_nothing_cached():
    cache = QueryCache()

    def broken():
        raise RuntimeError('down')

    with pytest.raises(RuntimeError):
        cache.get(('outline',), broken)

    assert cache.peek(('outline',)) is None


def test_invalidate_drops_every_key_with_name():
    cache = QueryCache()
    cache.set(('section-progress', 1), 'one')
    cache.set(('section-progress', 2), 'two')
    cache.set(('outline',), 'tree')

    cache.invalidate('section-progress')

    assert cache.peek(('section-progress', 1)) is None
    assert cache.peek(('section-progress', 2)) is None
    assert cache.peek(('outline',)) == 'tree'


def test_invalidate_tells_subscribers():
    cache = QueryCache()
    events = []
    callback = cache.subscribe(events.append)

    cache.invalidate('outline', 'doc-progress')
    cache.unsubscribe(callback)
    cache.invalidate('outline')

    assert events == [('outline', 'doc-progress')]


def test_get_when_invalidated_during_load_then_result_not_stored():
    cache = QueryCache()

    def loader():
        # a write lands while this load is still reading
        cache.invalidate('outline')
        return ['stale']

    assert cache.get(('outline',), loader) == ['stale']
    assert cache.peek(('outline',)) is None
    assert cache.get(('outline',), lambda: ['fresh']) == ['fresh']
    assert cache.peek(('outline',)) == ['fresh']


def test_get_when_other_name_invalidated_during_load_then_result_stored():
    cache = QueryCache()

    def loader():
        cache.invalidate('answer')
        return ['tree']

    cache.get(('outline',), loader)

    assert cache.peek(('outline',)) == ['tree']


def test_invalidate_bumps_generation_even_when_nothing_cached():
    cache = QueryCache()

    cache.invalidate('outline')
    cache.invalidate('outline', 'answer')

    assert cache.generation('outline') == 2
    assert cache.generation('answer') == 1
    assert cache.generation('doc-progress') == 0


def test_clear_discards_loads_in_flight():
    cache = QueryCache()
    cache.set(('outline',), 'tree')

    def loader():
        cache.clear()
        return 'old'

    cache.get(('section-progress', 1), loader)

    assert cache.peek(('outline',)) is None
    assert cache.peek(('section-progress', 1)) is None
