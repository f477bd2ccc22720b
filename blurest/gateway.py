"""
Synchronous call boundary for embedding the blurhash cache.

CallGateway is the only layer that turns typed errors into result
dictionaries. Hosts (a static site generator plugin, a template filter,
the CLI) call it and never see a raw exception, with two exceptions:
- initialize() raises InitError, so a misconfigured host fails loudly
- ContextCorruptedError is always raised; the host must re-initialize

Result shapes:
    {'success': True, 'blurhash': str, 'width': int, 'height': int}
    {'success': False, 'error': str, 'code': str}
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Iterable, Optional

from .context import SharedContext
from .exceptions import BlurestError, ContextCorruptedError


logger = logging.getLogger(__name__)


def success_result(result) -> dict:
    """Build the success dictionary for a FingerprintResult."""
    return {'success': True, **result.to_dict()}


def failure_result(error: BlurestError) -> dict:
    """Build the failure dictionary for a typed error."""
    return {'success': False, 'error': f"Error: {error}", 'code': error.code}


class CallGateway:
    """
    Request/response facade over a SharedContext.

    Usage:
        gateway = CallGateway()
        gateway.initialize('/srv/site/.blurhash.db', '/srv/site')
        result = gateway.get_blurhash('images/hero.jpg')
        if result['success']:
            print(result['blurhash'], result['width'], result['height'])
    """

    def __init__(self, context: Optional[SharedContext] = None):
        self.context = context or SharedContext()

    def initialize(self, store_location: str, project_root: str | os.PathLike) -> bool:
        """
        Initialize (or re-initialize) the cache.

        Returns:
            True on success

        Raises:
            InitError: Database unreachable or root unresolvable
        """
        self.context.init(store_location, project_root)
        return True

    def get_blurhash(self, image_path: str | os.PathLike) -> dict:
        """
        Get the blurhash, width and height for one image.

        Raises:
            ContextCorruptedError: Only failure not returned as a dict
        """
        try:
            result = self.context.get_blurhash(image_path)
        except ContextCorruptedError:
            raise
        except BlurestError as e:
            logger.debug(f"Blurhash lookup failed for {image_path}: {e}")
            return failure_result(e)
        return success_result(result)

    # Name used by hosts that think of the result as a fingerprint
    get_fingerprint = get_blurhash

    def get_blurhash_batch(self, image_paths: Iterable[str | os.PathLike]) -> list[dict]:
        """
        Get results for several images, one locked pass each.

        The lock is released between images so other callers are not
        starved during a long batch.
        """
        return [self.get_blurhash(path) for path in image_paths]

    def is_initialized(self) -> bool:
        """True when initialize() succeeded and the context is usable."""
        return self.context.is_initialized()

    def clear_context(self) -> bool:
        """Close the database connection and forget the context."""
        self.context.clear()
        return True

    clear = clear_context

    def validation_stats(self) -> Optional[dict]:
        """Hit/miss counters for the current context, or None if not Ready."""
        try:
            return self.context.with_context(lambda app: app.validator.stats.to_dict())
        except BlurestError:
            return None

    def store_stats(self) -> dict:
        """
        Statistics of the cache database.

        Raises:
            NotInitializedError, ContextCorruptedError, StoreError
        """
        return self.context.with_context(lambda app: app.store.get_stats())


# Global gateway instance (singleton pattern)
_gateway_instance: Optional[CallGateway] = None
_gateway_lock = threading.Lock()


def get_gateway() -> CallGateway:
    """
    Get or create the process-wide gateway (thread-safe).

    Example:
        gateway = get_gateway()
        gateway.initialize(db_path, root)
    """
    global _gateway_instance
    if _gateway_instance is None:
        with _gateway_lock:
            # Double-check after acquiring lock
            if _gateway_instance is None:
                _gateway_instance = CallGateway()
    return _gateway_instance


def reset_gateway():
    """
    Clear and drop the process-wide gateway (mainly for testing).
    """
    global _gateway_instance
    with _gateway_lock:
        if _gateway_instance is not None:
            _gateway_instance.clear_context()
        _gateway_instance = None


__all__ = [
    'CallGateway',
    'success_result',
    'failure_result',
    'get_gateway',
    'reset_gateway',
]
