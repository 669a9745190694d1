import threading

from ..utils import logger, assert_type
from ._sources import SourceFile, SourceRegistry
from ._effect import parse_effect


class _PendingLoad:
    """A load in progress. Other threads wait on it instead of loading again."""

    __slots__ = ["event", "effect", "error"]

    def __init__(self):
        self.event = threading.Event()
        self.effect = None
        self.error = None


class EffectCache:
    """A cache of parsed effects (thread-safe).

    Effects are stored by the identity of their source, and are kept for the
    lifetime of the cache. When multiple threads load the same source at the
    same time, it is read and parsed only once; the other threads wait for
    the result. Loads of different sources run in parallel.
    """

    def __init__(self, registry):
        assert_type("registry", registry, SourceRegistry)
        self._registry = registry
        self._lock = threading.Lock()
        self._effects = {}  # identity -> Effect
        self._pending = {}  # identity -> _PendingLoad

    def __repr__(self):
        return f"<EffectCache with {len(self._effects)} effects at {hex(id(self))}>"

    def __len__(self):
        return len(self._effects)

    def __contains__(self, identity):
        return identity in self._effects

    @property
    def registry(self):
        """The SourceRegistry used to read sources."""
        return self._registry

    def get(self, identity):
        """Get the cached effect for the given identity, or None."""
        return self._effects.get(identity)

    def clear(self):
        """Remove all effects. Loads that are in progress are not affected."""
        with self._lock:
            self._effects.clear()

    def load(self, source_file):
        """Get the effect for the given SourceFile, reading and parsing it if needed.

        Errors from reading (SourceNotFound, SourceUnavailable) are
        propagated, and are not cached.
        """
        assert_type("source_file", source_file, SourceFile)
        identity = source_file.identity

        with self._lock:
            effect = self._effects.get(identity)
            if effect is not None:
                return effect
            pending = self._pending.get(identity)
            if pending is None:
                pending = self._pending[identity] = _PendingLoad()
                is_loader = True
            else:
                is_loader = False

        if not is_loader:
            pending.event.wait()
            if pending.error is not None:
                raise pending.error
            return pending.effect

        try:
            text = self._registry.read(source_file)
            effect = parse_effect(text, identity, source_file)
        except BaseException as err:
            pending.error = err
            raise
        else:
            pending.effect = effect
            with self._lock:
                self._effects[identity] = effect
            logger.debug(f"Loaded effect {identity!r}")
            return effect
        finally:
            with self._lock:
                self._pending.pop(identity, None)
            pending.event.set()
