from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

PRIMARY_LANGUAGE = "en"
SECONDARY_LANGUAGE = "fr"

MONTHS: Mapping[str, int] = MappingProxyType(
    {
        "january": 1,
        "february": 2,
        "march": 3,
        "april": 4,
        "may": 5,
        "june": 6,
        "july": 7,
        "august": 8,
        "september": 9,
        "october": 10,
        "november": 11,
        "december": 12,
    }
)

# Offsets in days from the reference date
RELATIVE_DAYS: Mapping[str, int] = MappingProxyType({"today": 0, "tonight": 0, "tomorrow": 1})

# Python weekday numbering (Monday is 0)
WEEKDAYS: Mapping[str, int] = MappingProxyType(
    {
        "monday": 0,
        "tuesday": 1,
        "wednesday": 2,
        "thursday": 3,
        "friday": 4,
        "saturday": 5,
        "sunday": 6,
    }
)

URGENCY_WORDS: Tuple[str, ...] = ("urgent", "important", "priority", "asap")
FULL_DAY_PHRASES: Tuple[str, ...] = ("all day", "whole day", "all-day")
CONNECTORS: Tuple[str, ...] = ("at", "on", "by", "for", "around")
DETAIL_LABELS: Tuple[str, ...] = ("details", "detail", "notes", "note", "description")

FRENCH_TO_ENGLISH: Mapping[str, str] = MappingProxyType(
    {
        "toute la journée": "all day",
        "toute la journee": "all day",
        "journée complète": "all day",
        "journee complete": "all day",
        "ce soir": "tonight",
        "aujourd'hui": "today",
        "aujourd’hui": "today",
        "et demie": "thirty",
        "et demi": "thirty",
        "pour": "for",
        "à": "at",
        "vers": "around",
        "le": "on",
        "la": "on",
        "les": "on",
        "demain": "tomorrow",
        "matin": "morning",
        "midi": "noon",
        "soir": "evening",
        "nuit": "night",
        "urgent": "urgent",
        "urgente": "urgent",
        "urgence": "urgent",
        "important": "urgent",
        "importante": "urgent",
        "prioritaire": "priority",
        "journée": "day",
        "complète": "full",
        "dans": "in",
        "jour": "day",
        "jours": "days",
        "prochain": "next",
        "prochaine": "next",
        "lundi": "monday",
        "mardi": "tuesday",
        "mercredi": "wednesday",
        "jeudi": "thursday",
        "vendredi": "friday",
        "samedi": "saturday",
        "dimanche": "sunday",
        "janvier": "january",
        "février": "february",
        "fevrier": "february",
        "mars": "march",
        "avril": "april",
        "mai": "may",
        "juin": "june",
        "juillet": "july",
        "août": "august",
        "aout": "august",
        "septembre": "september",
        "octobre": "october",
        "novembre": "november",
        "décembre": "december",
        "decembre": "december",
        "heure": "hour",
        "heures": "hours",
    }
)


def word_pattern(phrase: str) -> str:
    """
    Regex source matching ``phrase`` as a whole word (or whole phrase).

    Inner whitespace matches any run of whitespace. Boundaries are expressed
    as lookarounds so phrases starting or ending with punctuation still work.
    """
    parts = [re.escape(p) for p in phrase.split()]
    return r"(?<!\w)" + r"\s+".join(parts) + r"(?!\w)"


def collapse_spaces(text: str) -> str:
    return re.sub(r"\s{2,}", " ", text).strip()


@dataclass(frozen=True)
class Locale:
    """
    Vocabulary for one supported speech language.

    ``translations`` maps local words/phrases to their English equivalents.
    The primary locale has an empty table.
    """

    code: str
    translations: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    detail_labels: Tuple[str, ...] = DETAIL_LABELS

    def translate(self, text: str) -> str:
        """Lowercase ``text`` and substitute the vocabulary, longest phrases first."""
        working = text.lower()
        for source in sorted(self.translations, key=len, reverse=True):
            target = self.translations[source]
            working = re.sub(word_pattern(source), target, working, flags=re.IGNORECASE)
        return working

    def sources_for(self, english: str) -> List[str]:
        """Local words that translate to ``english`` (excluding the word itself)."""
        return [src for src, dst in self.translations.items() if dst == english and src != english]

    def alternatives(self, english: str) -> str:
        """Regex alternation for ``english`` and every local word translating to it."""
        options = [english, *self.sources_for(english)]
        options.sort(key=len, reverse=True)
        return "(?:" + "|".join(r"\s+".join(re.escape(w) for w in o.split()) for o in options) + ")"


ENGLISH = Locale(code=PRIMARY_LANGUAGE)
FRENCH = Locale(
    code=SECONDARY_LANGUAGE,
    translations=FRENCH_TO_ENGLISH,
    detail_labels=DETAIL_LABELS + ("détails", "détail", "remarques", "remarque"),
)

_LOCALES: Mapping[str, Locale] = MappingProxyType({ENGLISH.code: ENGLISH, FRENCH.code: FRENCH})


# PUBLIC_INTERFACE
def get_locale(language: Optional[str]) -> Locale:
    """
    Resolve a language tag to a Locale.

    Tags match by their primary subtag ("fr", "fr-FR" and "FR_ca" all give
    French). Unknown or missing tags give the primary (English) locale.
    """
    if not language:
        return ENGLISH
    prefix = re.split(r"[-_]", language.strip().lower(), maxsplit=1)[0]
    return _LOCALES.get(prefix, ENGLISH)
