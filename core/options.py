"""
Option storage with caching and registered sanitizers.

Options are whole values keyed by name: every write replaces the stored
value, and readers always get the full structure back. Keys can be
registered with a sanitize callback so that every write path cleans the
value the same way.
"""

import logging
from typing import Any, Callable, Dict, Optional

from django.core.cache import cache

logger = logging.getLogger(__name__)

Sanitizer = Callable[[Any], Any]


class RegisteredSetting:
    """A registered option key with its group, sanitizer and default."""

    def __init__(self, group: str, key: str, sanitize_callback: Optional[Sanitizer] = None, default: Any = None):
        self.group = group
        self.key = key
        self.sanitize_callback = sanitize_callback
        self.default = default

    def sanitize(self, value: Any) -> Any:
        if self.sanitize_callback is None:
            return value
        return self.sanitize_callback(value)

    def __repr__(self):
        return f"<RegisteredSetting {self.group}:{self.key}>"


_registry: Dict[str, RegisteredSetting] = {}


def register_setting(group: str, key: str, sanitize_callback: Optional[Sanitizer] = None, default: Any = None) -> RegisteredSetting:
    """
    Register an option key and the callback used to sanitize it on write.

    Registering the same key twice replaces the earlier registration.
    """
    setting = RegisteredSetting(group, key, sanitize_callback, default)
    _registry[key] = setting
    return setting


def get_registered_setting(key: str) -> Optional[RegisteredSetting]:
    return _registry.get(key)


class OptionStore:
    """Centralized option access with read-through caching."""

    CACHE_TIMEOUT = 300  # 5 minutes

    @staticmethod
    def _cache_key(key: str) -> str:
        return f'option_{key}'

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Get an option value.

        Args:
            key: Option key to retrieve
            default: Value returned when the option has never been stored

        Returns:
            Stored value or default
        """
        cached = cache.get(cls._cache_key(key))
        if cached is not None:
            return cached['value'] if cached['exists'] else default

        from core.models import Option

        option = Option.objects.filter(key=key).first()
        if option is None:
            cache.set(cls._cache_key(key), {'exists': False, 'value': None}, cls.CACHE_TIMEOUT)
            return default

        cache.set(cls._cache_key(key), {'exists': True, 'value': option.value}, cls.CACHE_TIMEOUT)
        return option.value

    @classmethod
    def set(cls, key: str, value: Any, validator: Optional[Sanitizer] = None) -> Any:
        """
        Replace an option value.

        The value passes through ``validator`` when given, otherwise through
        the sanitize callback registered for the key (if any).

        Returns:
            The value actually stored
        """
        from core.models import Option

        if validator is None:
            registered = get_registered_setting(key)
            if registered is not None:
                validator = registered.sanitize

        if validator is not None:
            value = validator(value)

        Option.objects.update_or_create(key=key, defaults={'value': value})
        cache.set(cls._cache_key(key), {'exists': True, 'value': value}, cls.CACHE_TIMEOUT)
        logger.debug("Option %s updated", key)
        return value

    @classmethod
    def delete(cls, key: str) -> bool:
        """Delete an option. Returns True if a stored value was removed."""
        from core.models import Option

        deleted, _ = Option.objects.filter(key=key).delete()
        cache.delete(cls._cache_key(key))
        return deleted > 0

    @classmethod
    def clear_cache(cls):
        """Clear the cache for every stored option."""
        from core.models import Option

        for key in Option.objects.values_list('key', flat=True):
            cache.delete(cls._cache_key(key))
