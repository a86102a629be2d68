# /quadriparlanti/core/i18n.py

"""
Locale resolution and message bundles.

Every page path is prefixed with a locale code. A bundle is a JSON file in
`quadriparlanti/messages/`; asking for a locale without a bundle is a
not-found outcome.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import LocaleNotFoundError

MESSAGES_DIR = Path(__file__).resolve().parent.parent / "messages"
SUPPORTED_LOCALES = ("it",)
DEFAULT_LOCALE = "it"


def ensure_locale(locale: str) -> str:
    if locale not in SUPPORTED_LOCALES:
        raise LocaleNotFoundError(locale)
    return locale


@lru_cache()
def load_messages(locale: str) -> Dict[str, Any]:
    ensure_locale(locale)
    bundle_path = MESSAGES_DIR / f"{locale}.json"
    if not bundle_path.exists():
        raise LocaleNotFoundError(locale)
    with bundle_path.open(encoding="utf-8") as bundle:
        return json.load(bundle)


class Translator:
    """Dotted-key lookup over a bundle; unknown keys render as the key itself."""

    def __init__(self, locale: str):
        self.locale = ensure_locale(locale)
        self.messages = load_messages(locale)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        node: Any = self.messages
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node if isinstance(node, str) else default

    def __call__(self, key: str, **params: Any) -> str:
        message = self.get(key, key)
        return message.format(**params) if params else message
