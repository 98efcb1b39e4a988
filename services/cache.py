"""
Read-through cache for outline queries.

Keys are tuples whose first element is the query name, e.g. ('outline',) or
('section-progress', 3). Writes drop keys by name and every subscriber is told
which names were dropped, so anything holding a view knows to read again.

Each name carries a generation that every invalidation bumps. A load that
overlapped an invalidation of its name is returned to its caller but never
stored, so a value read before a write cannot outlive that write.
"""
import logging
import threading

logger = logging.getLogger(__name__)

_MISSING = object()


class QueryCache:

    def __init__(self):
        self._values = {}
        self._generations = {}
        self._clears = 0
        self._subscribers = []
        self._lock = threading.RLock()

    def get(self, key, loader):
        """Return the cached value for key, calling loader() on a miss."""
        with self._lock:
            value = self._values.get(key, _MISSING)
            stamp = self._stamp(key[0])
        if value is not _MISSING:
            return value

        value = loader()

        with self._lock:
            if self._stamp(key[0]) == stamp:
                self._values[key] = value
            else:
                logger.debug('cache load of %s overlapped an invalidation, not stored', key)
        return value

    def peek(self, key, default=None):
        with self._lock:
            return self._values.get(key, default)

    def set(self, key, value):
        with self._lock:
            self._values[key] = value

    def generation(self, name):
        with self._lock:
            return self._generations.get(name, 0)

    def _stamp(self, name):
        return self._clears, self._generations.get(name, 0)

    def invalidate(self, *names):
        """Drop every key whose name is in names and tell the subscribers."""
        with self._lock:
            for name in names:
                self._generations[name] = self._generations.get(name, 0) + 1
            dropped = [key for key in self._values if key[0] in names]
            for key in dropped:
                del self._values[key]
            subscribers = list(self._subscribers)

        logger.debug('cache invalidated %s (%d keys)', ', '.join(names), len(dropped))

        for callback in subscribers:
            callback(names)

    def clear(self):
        with self._lock:
            names = tuple(sorted({key[0] for key in self._values}))
            self._clears += 1
            self._values.clear()
            subscribers = list(self._subscribers)

        for callback in subscribers:
            callback(names)

    def subscribe(self, callback):
        with self._lock:
            self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback):
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
