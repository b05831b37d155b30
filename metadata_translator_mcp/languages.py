"""Supported-language catalog and per-session selection flags."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from importlib import resources
from pathlib import Path

_CATALOG = "supportedlanguages.json"


@dataclass
class Language:
    language_tag: str
    display_name: str
    is_selected: bool = False
    is_model_default: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def load_catalog(path: str | Path | None = None) -> list[Language]:
    """Read ``[{LanguageTag, DisplayName}, ...]`` from ``path`` or the packaged list."""
    if path is None:
        text = resources.files(__package__).joinpath("resources").joinpath(_CATALOG).read_text(encoding="utf-8")
    else:
        text = Path(path).read_text(encoding="utf-8-sig")

    return [
        Language(language_tag=item["LanguageTag"], display_name=item.get("DisplayName", item["LanguageTag"]))
        for item in json.loads(text)
    ]


class LanguageRegistry:
    def __init__(self, languages: list[Language]):
        self._languages = list(languages)
        self._by_tag = {lang.language_tag.lower(): lang for lang in self._languages}

    @classmethod
    def load(cls, path: str | Path | None = None) -> "LanguageRegistry":
        return cls(load_catalog(path))

    def __iter__(self):
        return iter(self._languages)

    def __len__(self) -> int:
        return len(self._languages)

    def get(self, tag: str) -> Language | None:
        return self._by_tag.get(tag.lower())

    def selected(self) -> list[Language]:
        return [lang for lang in self._languages if lang.is_selected]

    @property
    def default(self) -> Language | None:
        return next((lang for lang in self._languages if lang.is_model_default), None)

    @property
    def has_target_languages(self) -> bool:
        return len(self.selected()) > 1

    def set_flags(self, tag: str, is_selected: bool, is_model_default: bool = False) -> bool:
        """Flag a language; returns False for unknown tags or a default-culture demotion."""
        current = self.default
        if (
            current is not None
            and not is_model_default
            and current.language_tag.lower() == tag.lower()
        ):
            return False

        language = self.get(tag)
        if language is None:
            return False

        if is_model_default:
            for other in self._languages:
                other.is_model_default = False
            is_selected = True

        language.is_selected = is_selected
        language.is_model_default = is_model_default
        return True

    def initialize(self, culture_names: list[str]) -> None:
        """Flag the model's cultures; the first name is the model default."""
        for lang in self._languages:
            lang.is_selected = False
            lang.is_model_default = False

        if not culture_names:
            return
        self.set_flags(culture_names[0], True, True)
        for name in culture_names[1:]:
            self.set_flags(name, True)

    def deselect_all(self) -> None:
        for lang in self.selected():
            if not lang.is_model_default:
                lang.is_selected = False
