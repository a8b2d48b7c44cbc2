from datetime import date

from ohmytasks.locales import get_locale
from ohmytasks.voice_parser import DEFAULT_TASK_NAME, parse_transcript, split_name_details

# A Wednesday
TODAY = date(2025, 1, 15)


def parse(text, language="en"):
    return parse_transcript(text, language, today=TODAY)


class TestEnglish:
    def test_relative_day_time_and_urgency(self):
        draft = parse("Call mom tomorrow at 5pm urgent")
        assert draft["name"] == "Call mom"
        assert draft["date"] == "2025-01-16"
        assert draft["time"] == "17:00"
        assert draft["isUrgent"] is True
        assert draft["isFullDay"] is False
        assert draft["priority"] == "medium"
        assert draft["tags"] == ""

    def test_iso_date_and_colon_time(self):
        draft = parse("Dentist on 2025-03-18 at 10:00")
        assert draft["name"] == "Dentist"
        assert draft["date"] == "2025-03-18"
        assert draft["time"] == "10:00"

    def test_full_day_clears_time(self):
        draft = parse("Dentist on 2025-03-18 all day at 10:00")
        assert draft["name"] == "Dentist"
        assert draft["isFullDay"] is True
        assert draft["time"] == ""

    def test_plain_utterance_is_the_name(self):
        draft = parse("Water the plants")
        assert draft["name"] == "Water the plants"
        assert draft["date"] == ""
        assert draft["time"] == ""
        assert draft["isUrgent"] is False

    def test_blank_transcript_gives_default_name(self):
        assert parse("   ")["name"] == DEFAULT_TASK_NAME
        assert parse("")["name"] == DEFAULT_TASK_NAME

    def test_same_weekday_means_next_week(self):
        assert parse("Team meeting wednesday")["date"] == "2025-01-22"

    def test_later_weekday_this_week(self):
        draft = parse("Gym friday")
        assert draft["date"] == "2025-01-17"
        assert draft["name"] == "Gym"

    def test_next_weekday(self):
        draft = parse("Review next monday")
        assert draft["date"] == "2025-01-20"
        assert draft["name"] == "Review"

    def test_weekday_next_week(self):
        draft = parse("Monday next week standup")
        assert draft["date"] == "2025-01-20"
        assert draft["name"] == "standup"

    def test_month_day(self):
        draft = parse("Dinner march 5th")
        assert draft["date"] == "2025-03-05"
        assert draft["name"] == "Dinner"

    def test_numeric_day_first(self):
        assert parse("Pay rent 01/02")["date"] == "2025-02-01"
        assert parse("Pay rent 01/02/26")["date"] == "2026-02-01"

    def test_impossible_date_is_left_in_the_name(self):
        draft = parse("Pay rent 31/02")
        assert draft["date"] == ""
        assert draft["name"] == "Pay rent 31/02"

    def test_in_days(self):
        draft = parse("Submit report in 3 days")
        assert draft["date"] == "2025-01-18"
        assert draft["name"] == "Submit report"

    def test_colon_time_with_meridiem(self):
        draft = parse("Meeting at 3:30 pm")
        assert draft["time"] == "15:30"
        assert draft["name"] == "Meeting"

    def test_midnight_am(self):
        assert parse("Backup at 12am")["time"] == "00:00"

    def test_out_of_range_time_ignored(self):
        draft = parse("Alarm 25:00")
        assert draft["time"] == ""

    def test_details_after_dash(self):
        draft = parse("Buy groceries - milk and eggs")
        assert draft["name"] == "Buy groceries"
        assert draft["details"] == "milk and eggs"

    def test_details_label(self):
        draft = parse("Call plumber details: leaking sink")
        assert draft["name"] == "Call plumber"
        assert draft["details"] == "leaking sink"


class TestFrench:
    def test_tomorrow_h_time_and_urgency(self):
        draft = parse("Acheter du lait demain à 18h urgent", "fr-FR")
        assert draft["name"] == "Acheter du lait"
        assert draft["date"] == "2025-01-16"
        assert draft["time"] == "18:00"
        assert draft["isUrgent"] is True

    def test_iso_date(self):
        draft = parse("Rendez-vous le 2025-03-18 à 9h", "fr")
        assert draft["name"] == "Rendez-vous"
        assert draft["date"] == "2025-03-18"
        assert draft["time"] == "09:00"

    def test_h_time_with_minutes(self):
        draft = parse("Réunion demain à 14h30", "fr")
        assert draft["time"] == "14:30"
        assert draft["name"] == "Réunion"

    def test_day_then_month(self):
        draft = parse("Anniversaire le 12 mars", "fr")
        assert draft["date"] == "2025-03-12"
        assert draft["name"] == "Anniversaire"

    def test_weekday_followed_by_next(self):
        draft = parse("Réunion lundi prochain", "fr")
        assert draft["date"] == "2025-01-20"
        assert draft["name"] == "Réunion"

    def test_whole_day(self):
        draft = parse("Déménagement samedi toute la journée", "fr")
        assert draft["isFullDay"] is True
        assert draft["date"] == "2025-01-18"
        assert draft["name"] == "Déménagement"

    def test_english_words_still_work_with_french_locale(self):
        assert parse("Acheter du pain tomorrow", "fr")["date"] == "2025-01-16"


class TestSplitNameDetails:
    def test_colon_split(self):
        assert split_name_details("Groceries: milk", get_locale("en")) == ("Groceries", "milk")

    def test_sentence_split(self):
        assert split_name_details("Call Bob. Ask about the invoice", get_locale("en")) == (
            "Call Bob",
            "Ask about the invoice",
        )

    def test_french_label(self):
        assert split_name_details("Appeler Paul remarques: rappel", get_locale("fr")) == ("Appeler Paul", "rappel")

    def test_no_separator(self):
        assert split_name_details("Just a name", get_locale("en")) == ("Just a name", "")
