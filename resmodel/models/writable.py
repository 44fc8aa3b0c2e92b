"""
Writable Model

Lazily computed serialized form for models that can be written to bytes.

The buffer is computed on first request and kept until something uncaches
the model. Models flagged never_cache serialize on every request and keep
nothing.
"""

from typing import Optional

from .cacheable import CacheableModel


class LazyBuffer:
    """
    Lazy, cached serialization.

    Subclasses implement _serialize(). Callers use get_buffer().
    """

    def __init__(self, buffer: Optional[bytes] = None, never_cache: bool = False):
        self._never_cache = never_cache
        self._cached_buffer: Optional[bytes] = None if never_cache else buffer

    @property
    def never_cache(self) -> bool:
        """If True, the buffer is recomputed on every request."""
        return self._never_cache

    @never_cache.setter
    def never_cache(self, value: bool):
        self._never_cache = bool(value)
        if self._never_cache:
            self._cached_buffer = None

    @property
    def has_changed(self) -> bool:
        """Whether the next get_buffer() call has to serialize."""
        return self._never_cache or self._cached_buffer is None

    def get_buffer(self, force_uncache: bool = False) -> bytes:
        """
        Return the serialized form of this model.

        Args:
            force_uncache: Discard the cached buffer before returning

        Returns:
            The cached buffer, or a freshly serialized one
        """
        if self._never_cache:
            return self._serialize()

        if force_uncache:
            self.uncache()

        if self._cached_buffer is None:
            self._cached_buffer = self._serialize()

        return self._cached_buffer

    def uncache(self):
        """Discard the cached buffer."""
        self._cached_buffer = None

    def cache_buffer(self, buffer: bytes):
        """Keep an already serialized form as the cache, unless never_cache is set."""
        if not self._never_cache:
            self._cached_buffer = buffer

    def _serialize(self) -> bytes:
        raise NotImplementedError(f"{type(self).__name__} does not implement _serialize()")


class WritableModel(LazyBuffer, CacheableModel):
    """A model in the ownership graph whose serialized form is cached."""

    def __init__(self, buffer: Optional[bytes] = None, never_cache: bool = False,
                 owner: Optional[CacheableModel] = None):
        LazyBuffer.__init__(self, buffer, never_cache)
        CacheableModel.__init__(self, owner)

    def uncache(self):
        """Discard this model's buffer and uncache its owner."""
        LazyBuffer.uncache(self)
        CacheableModel.uncache(self)
