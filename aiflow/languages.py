"""Language normalization.

Callers send either a 2-letter code (``ta``) or an English language name
(``Tamil``). Everything downstream works with the canonical code.
"""

from typing import NamedTuple

DEFAULT_LANGUAGE = "en"


class Language(NamedTuple):
    """A supported language."""

    code: str
    name: str
    native: str

    @property
    def book_key(self) -> str:
        """Key used by book chunks for this language."""
        return self.name.lower()


LANGUAGES: dict[str, Language] = {
    lang.code: lang
    for lang in (
        Language("en", "English", "English"),
        Language("ta", "Tamil", "தமிழ்"),
        Language("hi", "Hindi", "हिन्दी"),
        Language("es", "Spanish", "Español"),
        Language("fr", "French", "Français"),
        Language("de", "German", "Deutsch"),
        Language("ja", "Japanese", "日本語"),
        Language("zh", "Chinese", "中文"),
        Language("ko", "Korean", "한국어"),
        Language("ar", "Arabic", "العربية"),
        Language("pt", "Portuguese", "Português"),
        Language("te", "Telugu", "తెలుగు"),
        Language("ml", "Malayalam", "മലയാളം"),
    )
}

_NAME_TO_CODE = {lang.name.lower(): lang.code for lang in LANGUAGES.values()}


def normalize_language(value: str | None) -> str:
    """Resolve free-form language input to a canonical code.

    Unknown input resolves to ``en``; this never raises.
    """
    if not value:
        return DEFAULT_LANGUAGE

    lowered = value.strip().lower()
    if len(lowered) == 2 and lowered in LANGUAGES:
        return lowered
    return _NAME_TO_CODE.get(lowered, DEFAULT_LANGUAGE)


def get_language(code: str) -> Language:
    return LANGUAGES.get(code, LANGUAGES[DEFAULT_LANGUAGE])


def display_name(code: str) -> str:
    """English display name for a code, ``English`` when unknown."""
    return get_language(code).name


def native_label(code: str) -> str:
    return get_language(code).native


def book_key(code: str) -> str:
    return get_language(code).book_key
