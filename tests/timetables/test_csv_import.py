from __future__ import annotations

import pytest

from src.absence_portal.absence_portal.core.enums import WeekDay
from src.absence_portal.absence_portal.core.exceptions import ValidationError
from src.absence_portal.absence_portal.timetables.csv_import import parse_timetable_csv

HEADER = "course,semester,day,time,subject,facultyId,facultyName"


def test_rows_become_entries():
    entries, skipped = parse_timetable_csv(
        f"{HEADER}\nBCA,3,4,14:00 - 15:00,Algorithms,F001,Dr. Rao\nBCA,3,Friday,09:00,Ethics,F002,Prof. Mehta\n"
    )

    assert skipped == 0
    assert [(e.day, e.time, e.subject, e.faculty_id) for e in entries] == [
        (WeekDay.THURSDAY, "14:00 - 15:00", "Algorithms", "F001"),
        (WeekDay.FRIDAY, "09:00", "Ethics", "F002"),
    ]
    assert entries[0].faculty_name == "Dr. Rao"
    assert entries[0].date is None


def test_header_is_case_insensitive_and_order_free():
    text = (
        "\ufeffSubject,DAY,Time,Course,Semester,FacultyName,FacultyID\r\n"
        "Algorithms,4,14:00 - 15:00,BCA,3,Dr. Rao,F001\r\n"
    )

    entries, skipped = parse_timetable_csv(text)

    assert skipped == 0
    assert (entries[0].course, entries[0].semester, entries[0].faculty_id) == ("BCA", "3", "F001")


def test_blank_lines_are_ignored():
    entries, skipped = parse_timetable_csv(f"{HEADER}\n\nBCA,3,1,09:00 - 10:00,Databases,F001,Dr. Rao\n\n")
    assert (len(entries), skipped) == (1, 0)


@pytest.mark.parametrize(
    "row",
    [
        "BCA,3,1,09:00 - 10:00,Databases,F001",
        "BCA,3,1,09:00 - 10:00,Databases,F001,Dr. Rao,extra",
        ",3,1,09:00 - 10:00,Databases,F001,Dr. Rao",
        "BCA,,1,09:00 - 10:00,Databases,F001,Dr. Rao",
        "BCA,3,1,09:00 - 10:00,,F001,Dr. Rao",
        "BCA,3,Someday,09:00 - 10:00,Databases,F001,Dr. Rao",
        "BCA,3,1,10:00 - 09:00,Databases,F001,Dr. Rao",
    ],
)
def test_bad_rows_are_skipped(row):
    entries, skipped = parse_timetable_csv(f"{HEADER}\nBCA,3,2,11:00 - 12:00,Statistics,F001,Dr. Rao\n{row}\n")

    assert [e.subject for e in entries] == ["Statistics"]
    assert skipped == 1


@pytest.mark.parametrize("text", ["", HEADER, f"{HEADER}\n   \n"])
def test_no_data_rows(text):
    with pytest.raises(ValidationError, match="CSV has no data rows."):
        parse_timetable_csv(text)


def test_missing_columns_are_named():
    with pytest.raises(ValidationError) as exc:
        parse_timetable_csv("course,semester,day,time,subject\nBCA,3,1,09:00 - 10:00,Databases\n")
    assert str(exc.value) == "Missing columns: facultyid, facultyname"
