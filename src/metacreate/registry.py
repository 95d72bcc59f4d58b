"""
Process-wide registry linking proxy handles to their real containers.

Entries are keyed by the identity of the proxy handle and removed by a
weakref.finalize callback when the handle is reclaimed. The registry refers
to real containers weakly as well; whoever owns the handle keeps the real
container alive (see metacreate.table.bind_proxy), so the registry never
keeps a handle alive, even through a real container that holds it.
"""

from __future__ import annotations

import logging as _logging
import threading as _threading
import typing as _typing
import weakref as _weakref

import metacreate.errors as errors

_logger = _logging.getLogger(__name__)


class ProxyRegistry:
    """Side table mapping proxy handle identity -> weak reference to the real container."""

    def __init__(self) -> None:
        self._entries: dict[int, _weakref.ref[_typing.Any]] = {}
        self._lock = _threading.RLock()  # finalizers may run while the lock is held

    def register(self, proxy: object, real: object) -> None:
        """
        Link a proxy handle to its real container.

        The real container is not kept alive by the registry.

        Args:
            proxy: The externally visible handle. Must support weak references.
            real: The container holding the data. Must support weak references.

        Raises:
            TypeError: If proxy or real cannot be weakly referenced, or real is None.
        """
        if real is None:
            raise TypeError("real container must not be None")

        real_ref = _weakref.ref(real)
        key = id(proxy)
        with self._lock:
            if key not in self._entries:
                _weakref.finalize(proxy, self._release, key)
            self._entries[key] = real_ref
        _logger.debug("Registered proxy %#x -> %s", key, type(real).__name__)

    def _release(self, key: int) -> None:
        with self._lock:
            self._entries.pop(key, None)
        _logger.debug("Released proxy %#x", key)

    def lookup(self, proxy: object) -> _typing.Any | None:
        """Return the real container for a proxy handle, or None."""
        real_ref = self._entries.get(id(proxy))
        if real_ref is None:
            return None
        return real_ref()

    def resolve(self, proxy: object) -> _typing.Any:
        """
        Return the real container for a proxy handle.

        Raises:
            ProxyLookupError: If no live real container is registered for proxy.
        """
        real = self.lookup(proxy)
        if real is None:
            raise errors.ProxyLookupError(
                f"no real container registered for {type(proxy).__name__} at {id(proxy):#x}"
            )
        return real

    def is_proxy(self, obj: object) -> bool:
        """Check whether obj is a live, registered proxy handle."""
        return self.lookup(obj) is not None

    def __len__(self) -> int:
        return len(self._entries)


PROXIES = ProxyRegistry()
"""The registry used by every intercepting template."""


def real_of(proxy: object) -> _typing.Any:
    """
    Return the real container behind a proxy handle.

    Raises:
        ProxyLookupError: If proxy is not a registered proxy handle.
    """
    return PROXIES.resolve(proxy)


def is_proxy(obj: object) -> bool:
    """Check whether obj is a registered proxy handle."""
    return PROXIES.is_proxy(obj)
