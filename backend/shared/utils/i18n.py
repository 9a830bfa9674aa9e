"""
Helpers for translated text stored as ``{"fr": ..., "en": ...}`` JSON.
"""

from typing import Any

DEFAULT_LANGUAGE = "fr"


def text_for(translations: dict[str, Any] | None, language: str = DEFAULT_LANGUAGE, fallback: str = "") -> str:
    """Text in ``language``, falling back to French and then ``fallback``."""
    if not translations:
        return fallback
    value = translations.get(language) or translations.get(DEFAULT_LANGUAGE)
    return value if isinstance(value, str) and value else fallback


def missing_languages(translations: dict[str, Any] | None, languages: list[str]) -> list[str]:
    """Languages with no non-blank text."""
    translations = translations or {}
    missing = []
    for language in languages:
        value = translations.get(language)
        if not isinstance(value, str) or not value.strip():
            missing.append(language)
    return missing


def is_complete(translations: dict[str, Any] | None, languages: list[str]) -> bool:
    return not missing_languages(translations, languages)


def clean_translations(translations: dict[str, Any] | None) -> dict[str, str]:
    """Strip values and drop blank entries."""
    if not translations:
        return {}
    cleaned = {}
    for language, value in translations.items():
        if value is None:
            continue
        value = str(value).strip()
        if value:
            cleaned[language] = value
    return cleaned
