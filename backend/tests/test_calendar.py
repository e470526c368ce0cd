"""Tests for iCalendar generation."""
import uuid
from datetime import date, time
from types import SimpleNamespace

from app.services.export_service import build_calendar, escape_text, fold_line


def _item(**fields):
    values = dict(
        id=uuid.uuid4(), date=None, section_id=None, day_number=None, start_time=None,
        end_time=None, title="Item", description=None, notes=None, address=None,
        place_name=None, category=None,
    )
    values.update(fields)
    return SimpleNamespace(**values)


def _trip(**fields):
    values = dict(
        id=uuid.uuid4(), name="Lisbon, Portugal", description=None, destination_name="Lisbon",
        start_date=date(2026, 5, 1), end_date=date(2026, 5, 3),
    )
    values.update(fields)
    return SimpleNamespace(**values)


class TestEscapeText:

    def test_escapes_special_characters(self):
        assert escape_text("a,b;c\\d\ne") == "a\\,b\\;c\\\\d\\ne"

    def test_crlf_becomes_single_newline_escape(self):
        assert escape_text("one\r\ntwo") == "one\\ntwo"

    def test_empty_values(self):
        assert escape_text(None) == ""
        assert escape_text("") == ""


class TestFoldLine:

    def test_short_line_untouched(self):
        assert fold_line("SUMMARY:Dinner") == "SUMMARY:Dinner"

    def test_long_line_folds_at_75_octets(self):
        line = "DESCRIPTION:" + "x" * 150
        folded = fold_line(line)
        parts = folded.split("\r\n")

        assert len(parts) > 1
        assert all(len(p.encode("utf-8")) <= 75 for p in parts)
        assert all(p.startswith(" ") for p in parts[1:])
        assert folded.replace("\r\n ", "") == line

    def test_multibyte_characters_are_not_split(self):
        line = "SUMMARY:" + "é" * 60
        folded = fold_line(line)

        for part in folded.split("\r\n"):
            assert len(part.encode("utf-8")) <= 75
            part.encode("utf-8").decode("utf-8")
        assert folded.replace("\r\n ", "") == line


class TestBuildCalendar:

    def test_trip_event_spans_whole_days(self):
        ics = build_calendar(_trip(), [], [])

        assert ics.startswith("BEGIN:VCALENDAR\r\n")
        assert ics.endswith("END:VCALENDAR\r\n")
        assert "X-WR-CALNAME:Lisbon\\, Portugal" in ics
        assert "DTSTART;VALUE=DATE:20260501" in ics
        assert "DTEND;VALUE=DATE:20260504" in ics

    def test_timed_item_defaults_to_one_hour(self):
        section = SimpleNamespace(id=uuid.uuid4(), date=date(2026, 5, 2), day_number=2)
        item = _item(section_id=section.id, start_time=time(9, 0), title="Belém Tower")

        ics = build_calendar(_trip(), [item], [section])

        assert "DTSTART:20260502T090000" in ics
        assert "DTEND:20260502T100000" in ics
        assert "SUMMARY:Belém Tower" in ics

    def test_day_number_resolves_against_trip_start(self):
        item = _item(day_number=3, title="Sintra day trip")
        ics = build_calendar(_trip(), [item], [])
        assert "DTSTART;VALUE=DATE:20260503" in ics

    def test_undated_items_are_skipped(self):
        items = [_item(title="Someday"), _item(day_number=1, title="Arrive")]
        ics = build_calendar(_trip(), items, [])

        assert ics.count("BEGIN:VEVENT") == 2
        assert "Someday" not in ics

    def test_trip_without_dates_has_no_trip_event(self):
        ics = build_calendar(_trip(start_date=None, end_date=None), [], [])
        assert "BEGIN:VEVENT" not in ics
