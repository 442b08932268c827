from datetime import date

import pytest

from medsupply.app.db.models.core_types import IssueNoFormat
from medsupply.services.issue_numbers import format_issue_no


def test_year_format_pads_id_to_six_digits():
    assert format_issue_no(7, date(2024, 3, 1)) == "ISS-2024-000007"
    assert format_issue_no(1234567, date(2024, 3, 1), IssueNoFormat.year) == "ISS-2024-1234567"


def test_date_format_keeps_raw_id():
    assert format_issue_no(7, date(2024, 3, 1), IssueNoFormat.date) == "ISS-20240301-7"
    assert format_issue_no(42, date(2025, 12, 31), "date") == "ISS-20251231-42"


def test_distinct_ids_give_distinct_numbers():
    day = date(2024, 3, 1)
    numbers = {format_issue_no(i, day) for i in range(1, 500)}
    assert len(numbers) == 499


@pytest.mark.parametrize("bad_id", [None, 0, -3])
def test_requires_store_assigned_id(bad_id):
    with pytest.raises(ValueError):
        format_issue_no(bad_id, date(2024, 3, 1))


def test_unknown_format_rejected():
    with pytest.raises(ValueError):
        format_issue_no(1, date(2024, 3, 1), "weekly")
