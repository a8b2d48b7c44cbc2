"""
Speech transcript parser.

Turns the final text produced by browser speech recognition into a task draft
(name, details, date, time, full-day and urgency flags) without any network
call. Detection runs on a lowercased working copy translated to English; the
name and details are cut from the caller's original wording.
"""
from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from typing import Callable, List, Optional, Tuple

from .locales import (
    CONNECTORS,
    FULL_DAY_PHRASES,
    MONTHS,
    RELATIVE_DAYS,
    URGENCY_WORDS,
    WEEKDAYS,
    Locale,
    collapse_spaces,
    get_locale,
    word_pattern,
)
from .models import TaskDraft

logger = logging.getLogger(__name__)

DEFAULT_TASK_NAME = "New Task"
DEFAULT_PRIORITY = "medium"

_MONTH_NAMES = "|".join(MONTHS)
_DAY_NAMES = "|".join([*RELATIVE_DAYS, *WEEKDAYS])
_CONNECTOR = r"(?:\b(?:" + "|".join(CONNECTORS) + r")\s+)?"

_URGENT_RE = re.compile(r"\b(?:" + "|".join(URGENCY_WORDS) + r")\b")
_FULL_DAY_RE = re.compile("|".join(word_pattern(p) for p in FULL_DAY_PHRASES))

_ISO_DATE_RE = re.compile(_CONNECTOR + r"(?<!\d)(\d{4})-(\d{2})-(\d{2})(?!\d)")
_NUMERIC_DATE_RE = re.compile(_CONNECTOR + r"(?<![\d/-])(\d{1,2})[/-](\d{1,2})(?:[/-](\d{4}|\d{2}))?(?![\d/-])")
_DAY_WORD_RE = re.compile(_CONNECTOR + r"(?:\bnext\s+)?\b(" + _DAY_NAMES + r")\b(?:\s+next(?:\s+week)?\b)?")
_MONTH_DAY_RE = re.compile(_CONNECTOR + r"\b(" + _MONTH_NAMES + r")\s+(\d{1,2})(?:st|nd|rd|th)?\b")
_DAY_MONTH_RE = re.compile(_CONNECTOR + r"\b(\d{1,2})(?:st|nd|rd|th|er)?\s+(?:of\s+)?(" + _MONTH_NAMES + r")\b")
_IN_DAYS_RE = re.compile(r"\bin\s+(\d{1,3})\s+days?\b")

_COLON_TIME_RE = re.compile(_CONNECTOR + r"(?<!\d)(\d{1,2}):(\d{2})(?!\d)(?:\s*(am|pm)\b)?")
_AMPM_TIME_RE = re.compile(_CONNECTOR + r"(?<![\d:])(\d{1,2})\s?(am|pm)\b")
_H_TIME_RE = re.compile(_CONNECTOR + r"(?<!\d)(\d{1,2})\s?h(?:(\d{2})|\s+(thirty))?\b")


def _iso_date(m: re.Match, today: date) -> Optional[date]:
    return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def _numeric_date(m: re.Match, today: date) -> Optional[date]:
    day, month, year = int(m.group(1)), int(m.group(2)), m.group(3)
    if year is None:
        full_year = today.year
    elif len(year) == 2:
        full_year = 2000 + int(year)
    else:
        full_year = int(year)
    return date(full_year, month, day)


def _day_word_date(m: re.Match, today: date) -> Optional[date]:
    word = m.group(1)
    if word in RELATIVE_DAYS:
        return today + timedelta(days=RELATIVE_DAYS[word])
    diff = (WEEKDAYS[word] - today.weekday()) % 7
    return today + timedelta(days=diff or 7)


def _month_day_date(m: re.Match, today: date) -> Optional[date]:
    return date(today.year, MONTHS[m.group(1)], int(m.group(2)))


def _day_month_date(m: re.Match, today: date) -> Optional[date]:
    return date(today.year, MONTHS[m.group(2)], int(m.group(1)))


def _in_days_date(m: re.Match, today: date) -> Optional[date]:
    return today + timedelta(days=int(m.group(1)))


def _clock(hours: int, minutes: int) -> Optional[str]:
    if 0 <= hours <= 23 and 0 <= minutes <= 59:
        return f"{hours:02d}:{minutes:02d}"
    return None


def _to_24h(hours: int, meridiem: str) -> int:
    if not 1 <= hours <= 12:
        raise ValueError(f"hour {hours} out of range for {meridiem}")
    if meridiem == "pm" and hours < 12:
        return hours + 12
    if meridiem == "am" and hours == 12:
        return 0
    return hours


def _colon_time(m: re.Match) -> Optional[str]:
    hours, minutes = int(m.group(1)), int(m.group(2))
    if m.group(3):
        hours = _to_24h(hours, m.group(3))
    return _clock(hours, minutes)


def _ampm_time(m: re.Match) -> Optional[str]:
    return _clock(_to_24h(int(m.group(1)), m.group(2)), 0)


def _h_time(m: re.Match) -> Optional[str]:
    minutes = 30 if m.group(3) else int(m.group(2) or 0)
    return _clock(int(m.group(1)), minutes)


DATE_DETECTORS: Tuple[Tuple[re.Pattern, Callable[[re.Match, date], Optional[date]]], ...] = (
    (_ISO_DATE_RE, _iso_date),
    (_NUMERIC_DATE_RE, _numeric_date),
    (_DAY_WORD_RE, _day_word_date),
    (_MONTH_DAY_RE, _month_day_date),
    (_DAY_MONTH_RE, _day_month_date),
)
RELATIVE_DATE_DETECTORS: Tuple[Tuple[re.Pattern, Callable[[re.Match, date], Optional[date]]], ...] = (
    (_IN_DAYS_RE, _in_days_date),
)
TIME_DETECTORS: Tuple[Tuple[re.Pattern, Callable[[re.Match], Optional[str]]], ...] = (
    (_COLON_TIME_RE, _colon_time),
    (_AMPM_TIME_RE, _ampm_time),
    (_H_TIME_RE, _h_time),
)


def _remove_span(text: str, m: re.Match) -> str:
    return collapse_spaces(text[: m.start()] + " " + text[m.end():])


def _remove_segment(original: str, segment: str, locale: Locale) -> str:
    """
    Remove ``segment`` (found in the translated working copy) from the
    caller's original wording.

    Each token of the segment may appear in the original either as is or as
    one of its local-language sources ("tomorrow" / "demain"). When the
    tokens are not found in sequence (local word order differs), the
    non-connector tokens are removed one by one.
    """
    tokens = segment.split()
    if not tokens:
        return original
    sequence = r"(?<!\w)" + r"\s+".join(locale.alternatives(t) for t in tokens) + r"(?!\w)"
    m = re.search(sequence, original, flags=re.IGNORECASE)
    if m:
        return _remove_span(original, m)

    for token in tokens:
        if token in CONNECTORS:
            continue
        m = re.search(r"(?<!\w)" + locale.alternatives(token) + r"(?!\w)", original, flags=re.IGNORECASE)
        if m:
            original = _remove_span(original, m)
    return original


def _strip_markers(text: str, locale: Locale) -> str:
    markers: List[str] = [*FULL_DAY_PHRASES, *URGENCY_WORDS]
    for marker in markers:
        pattern = r"(?<!\w)" + locale.alternatives(marker) + r"(?!\w)"
        text = re.sub(pattern, " ", text, flags=re.IGNORECASE)
    return collapse_spaces(text)


def split_name_details(text: str, locale: Locale) -> Tuple[str, str]:
    """
    Split the cleaned transcript into (name, details).

    Tried in order: an explicit "details:"-style label, " - ", ":", ". ".
    """
    labels = "|".join(re.escape(label) for label in sorted(locale.detail_labels, key=len, reverse=True))
    label_match = re.search(r"(?<!\w)(?:" + labels + r")\s*[:\-]\s*(.+)$", text, flags=re.IGNORECASE | re.DOTALL)
    if label_match:
        return text[: label_match.start()].strip(), label_match.group(1).strip()

    for separator in (" - ", ":", ". "):
        if separator in text:
            name, rest = text.split(separator, 1)
            return name.strip(), rest.strip()

    return text.strip(), ""


def _detect(working: str, original: str, detectors, locale: Locale, *args):
    for regex, convert in detectors:
        m = regex.search(working)
        if not m:
            continue
        try:
            value = convert(m, *args)
        except (ValueError, OverflowError, KeyError):
            # Not a real date/time (e.g. 31/02 or 25:00); try the next detector
            value = None
        if value is None:
            continue
        return value, _remove_span(working, m), _remove_segment(original, m.group(0), locale)
    return None, working, original


def empty_draft(name: str = DEFAULT_TASK_NAME) -> TaskDraft:
    return {
        "name": name,
        "details": "",
        "date": "",
        "time": "",
        "isFullDay": False,
        "isUrgent": False,
        "tags": "",
        "priority": DEFAULT_PRIORITY,
    }


# PUBLIC_INTERFACE
def parse_transcript(transcript: str, language: Optional[str] = None, today: Optional[date] = None) -> TaskDraft:
    """
    Parse a speech transcript into a task draft.

    Args:
        transcript: Final speech-recognition text.
        language: Language tag of the speech ("en", "fr", "fr-FR"...).
        today: Reference date for relative expressions (defaults to today).

    Returns:
        A TaskDraft dict. Never raises on odd input: anything the detectors
        do not recognise stays in the task name.
    """
    original = (transcript or "").strip()
    if not original:
        return empty_draft()

    today = today or date.today()
    locale = get_locale(language)
    working = locale.translate(original)

    is_urgent = bool(_URGENT_RE.search(working))
    is_full_day = bool(_FULL_DAY_RE.search(working))

    detected_date, working, original = _detect(working, original, DATE_DETECTORS, locale, today)
    if detected_date is None:
        detected_date, working, original = _detect(working, original, RELATIVE_DATE_DETECTORS, locale, today)

    detected_time, working, original = _detect(working, original, TIME_DETECTORS, locale)

    cleaned = _strip_markers(original, locale).strip(" ,;")
    name, details = split_name_details(cleaned, locale)

    draft = empty_draft(name.strip(" ,;") or DEFAULT_TASK_NAME)
    draft["details"] = details
    draft["date"] = detected_date.isoformat() if detected_date else ""
    draft["time"] = "" if is_full_day or not detected_time else detected_time
    draft["isFullDay"] = is_full_day
    draft["isUrgent"] = is_urgent
    logger.debug("Parsed transcript (%s) into draft %s", locale.code, draft)
    return draft
