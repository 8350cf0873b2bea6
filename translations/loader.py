"""
Translation loader.

Fetches the translation catalogue from the server, network first. When the
server can't be reached or answers with something unusable, the last good
catalogue is taken from a persistent cache. translations_loaded is sent
exactly once whenever a catalogue was applied, from either source.

States:
    IDLE -> REQUESTING -> SUCCEEDED
                       -> FAILED -> CACHE_LOOKUP -> CACHE_HIT
                                                 -> CACHE_MISS
"""

import json
import logging
from enum import Enum
from typing import Optional

from django.conf import settings
from django.core.cache import caches

from .ajax import AjaxMethod, ajax_request, handle_ajax_error, validate_ajax_response
from .signals import translations_loaded
from .translator import Translator

TRANSLATIONS_CACHE_KEY = "_translations"
ERROR_PREFIX = "Translations"


class LoaderState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CACHE_LOOKUP = "cache_lookup"
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"


class InvalidTranslationsError(ValueError):
    """Server answered, but not with a usable catalogue"""


class TranslationLoader:
    """
    Load translations into a Translator.

    Args:
        url: Translation catalogue URL
        translator: Translator to fill, a new one by default
        cache: Django cache backend, the TRANSLATIONS_CACHE_ALIAS cache by default
        alert: Alert handler for user-visible errors
        session: requests session
        logger: Logger, the module logger by default
        cache_key: Cache key holding the last good catalogue
    """

    def __init__(
        self,
        url: Optional[str],
        translator: Optional[Translator] = None,
        cache=None,
        alert=None,
        session=None,
        logger: Optional[logging.Logger] = None,
        cache_key: str = TRANSLATIONS_CACHE_KEY,
        timeout: Optional[float] = None
    ):
        if not url or not str(url).strip():
            raise ValueError("Translations URL not specified.")

        self.url = str(url).strip()
        self.translator = translator if translator is not None else Translator()
        self.cache = cache if cache is not None else caches[
            getattr(settings, 'TRANSLATIONS_CACHE_ALIAS', 'default')
        ]
        self.alert = alert
        self.session = session
        self.logger = logger or logging.getLogger(__name__)
        self.cache_key = cache_key
        self.timeout = timeout or getattr(settings, 'TRANSLATIONS_TIMEOUT', 10)
        self.state = LoaderState.IDLE
        self.error: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self.state in (LoaderState.SUCCEEDED, LoaderState.CACHE_HIT)

    def load(self) -> bool:
        """
        Load translations from the server, falling back to the cache.

        Returns:
            True if a catalogue was applied
        """
        self.state = LoaderState.REQUESTING
        self.error = None

        ajax_request(
            AjaxMethod.GET,
            self.url,
            done=self._on_done,
            fail=self._on_fail,
            content_type='json',
            session=self.session,
            timeout=self.timeout,
            alert=self.alert,
        )

        if self.loaded:
            translations_loaded.send(sender=type(self))
        return self.loaded

    def _on_done(self, data, status, response):
        if not validate_ajax_response(
            data,
            status,
            response,
            no_success_key=True,
            no_alert=True,
            error_prefix=ERROR_PREFIX,
        ):
            raise InvalidTranslationsError("Translations response invalid.")

        if not self.translator.from_json(data):
            raise InvalidTranslationsError("Translations catalogue malformed.")

        self.cache.set(self.cache_key, json.dumps(data), timeout=None)
        self.state = LoaderState.SUCCEEDED
        self.logger.debug("Translations loaded successfully from server.")

    def _on_fail(self, error, status, response) -> str:
        self.state = LoaderState.FAILED
        text = str(error) if error is not None else ''

        self.state = LoaderState.CACHE_LOOKUP
        cached = self.cache.get(self.cache_key)

        if cached and self.translator.from_json(cached):
            self.state = LoaderState.CACHE_HIT
            self.logger.debug("Translations loaded successfully from cache.")
        else:
            self.state = LoaderState.CACHE_MISS
            self.cache.delete(self.cache_key)

        self.error = handle_ajax_error(
            text,
            status,
            response,
            no_alert=self.state == LoaderState.CACHE_HIT,
            error_prefix=ERROR_PREFIX,
            alert=self.alert,
        )
        return self.error
