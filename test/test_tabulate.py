import pyarrow as pa
import pytest

from tidyground.utils.tabulate import format_value, tabulate

SURVEYS = pa.table(
    {
        "species_id": ["DM", "DO", "PE"],
        "sex": ["F", "M", None],
        "weight": [42.5, 48.0, 21.25],
    }
)


def test_tabulate():
    assert tabulate(SURVEYS).splitlines() == [
        "species_id | sex | weight",
        "---------- | --- | ------",
        "DM         | F   | 42.50",
        "DO         | M   | 48.00",
        "PE         | NA  | 21.25",
    ]


def test_tabulate_limits_rows():
    assert tabulate(SURVEYS, max_rows=1).splitlines() == [
        "species_id | sex | weight",
        "---------- | --- | ------",
        "DM         | F   | 42.50",
        "... and 2 more rows",
    ]


def test_tabulate_markdown():
    assert tabulate(SURVEYS.select(["sex"]), markdown=True).splitlines() == [
        "| sex |",
        "| --- |",
        "| F   |",
        "| M   |",
        "| NA  |",
    ]


def test_tabulate_no_rows():
    assert tabulate(SURVEYS.slice(0, 0)).splitlines() == [
        "species_id | sex | weight",
        "---------- | --- | ------",
    ]


@pytest.mark.parametrize(
    "value, kwargs, expected",
    [
        (None, {}, "NA"),
        (True, {}, "true"),
        (False, {}, "false"),
        (3, {}, "3"),
        (0.125, {}, "0.12"),
        (0.125, {"float_digits": 3}, "0.125"),
        (2.0, {"float_digits": 0}, "2"),
        ("Dipodomys", {}, "Dipodomys"),
        ("x" * 40, {}, "x" * 27 + "..."),
        ("a|b", {}, "a|b"),
        ("a|b", {"escape_pipes": True}, "a\\|b"),
    ],
)
def test_format_value(value, kwargs, expected):
    assert format_value(value, **kwargs) == expected
