"""
Translation catalogue in the shape served by django.views.i18n.JSONCatalog:

    {"catalog": {msgid: str | [str, ...]}, "formats": {...}, "plural": "n != 1"}
"""

import gettext as gettext_module
import json
from typing import Any, Callable, Dict, Optional, Union


def _default_plural(n) -> int:
    return 0 if n == 1 else 1


class Translator:
    """Client-side style message catalogue"""

    def __init__(self):
        self.catalog: Dict[str, Any] = {}
        self.formats: Dict[str, Any] = {}
        self.plural: Optional[str] = None
        self._plural_func: Callable[[int], int] = _default_plural
        self._loaded = False

    def from_json(self, payload: Union[str, bytes, dict]) -> bool:
        """
        Replace the catalogue with a JSONCatalog payload.

        Returns:
            True if applied, False if the payload is malformed. A malformed
            payload leaves the current catalogue untouched.
        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError:
                return False

        if not isinstance(payload, dict):
            return False

        catalog = payload.get('catalog')
        formats = payload.get('formats') or {}
        plural = payload.get('plural')

        if not isinstance(catalog, dict) or not isinstance(formats, dict):
            return False
        if plural is not None and not isinstance(plural, str):
            return False

        for value in catalog.values():
            if isinstance(value, list):
                if not all(isinstance(form, str) for form in value):
                    return False
            elif not isinstance(value, str):
                return False

        plural_func = _default_plural
        if plural:
            # gettext's Plural-Forms compiler, the one behind Django's .mo catalogues
            try:
                plural_func = gettext_module.c2py(plural)
            except (ValueError, SyntaxError, RecursionError):
                return False

        self.catalog = dict(catalog)
        self.formats = dict(formats)
        self.plural = plural
        self._plural_func = plural_func
        self._loaded = True
        return True

    def to_json(self) -> str:
        return json.dumps({
            'catalog': self.catalog,
            'formats': self.formats,
            'plural': self.plural,
        })

    def is_loaded(self) -> bool:
        return self._loaded

    def gettext(self, msgid: str) -> str:
        value = self.catalog.get(msgid)
        if value is None:
            return msgid
        if isinstance(value, list):
            return value[0] if value else msgid
        return value

    def ngettext(self, singular: str, plural: str, count: int) -> str:
        value = self.catalog.get(singular)
        if isinstance(value, str):
            return value
        if isinstance(value, list):
            index = int(self._plural_func(count))
            if 0 <= index < len(value):
                return value[index]
        return singular if count == 1 else plural

    def get_format(self, format_type: str):
        """Format setting by name, or the name itself when unknown"""
        return self.formats.get(format_type, format_type)
