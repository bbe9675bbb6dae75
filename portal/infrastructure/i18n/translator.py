from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from portal.infrastructure.i18n.translations import TRANSLATIONS

BASE_LANGUAGE = "es"


@dataclass(frozen=True)
class Translator:
    lang: str = BASE_LANGUAGE

    def t(self, key: str, **params: object) -> str:
        text = (
            TRANSLATIONS.get(self.lang, {}).get(key)
            or TRANSLATIONS[BASE_LANGUAGE].get(key)
            or key
        )
        if params:
            try:
                return text.format(**params)
            except (KeyError, IndexError):
                return text
        return text

    def format_date(self, value: date | str) -> str:
        if isinstance(value, date):
            return value.strftime("%d/%m/%Y")
        year, month, day = value.split("-")
        return f"{day}/{month}/{year}"


def select_language(
    requested: str | None,
    accept_language: str | None,
    supported: tuple[str, ...] = ("es", "en", "fr"),
    default: str = BASE_LANGUAGE,
) -> str:
    """Pick the explicit `lang` parameter, else the browser's primary language, else the default."""
    if requested and requested.lower() in supported:
        return requested.lower()
    if accept_language:
        for part in accept_language.split(","):
            code = part.split(";")[0].strip()[:2].lower()
            if code in supported:
                return code
    return default
