"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from ledgerkit.cli.date_filters import date_range_options, resolve_cli_date_range
from ledgerkit.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def _resolve(start_date=None, end_date=None, **flags):
    return resolve_cli_date_range(
        _ctx(), start_date=start_date, end_date=end_date, period_flags=flags
    )


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"this-month": True, "last-month": True}, "Only one period option"),
        ({"this-year": True, "start_date": "2024-01-01"}, "cannot be combined"),
        ({"start_date": "not-a-date"}, "Invalid start date"),
        ({"end_date": "someday soon"}, "Invalid end date"),
    ],
)
def test_rejected_combinations(capsys, kwargs, message):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        _resolve(**kwargs)

    assert excinfo.value.exit_code == 1
    assert message in capsys.readouterr().err


def test_single_period_flag():
    assert _resolve(**{"last-month": True, "this-year": False}) == get_date_range("last-month")


def test_explicit_dates():
    assert _resolve("2024-01-02", "Jan 5 2024") == (date(2024, 1, 2), date(2024, 1, 5))


def test_open_range():
    assert _resolve(**{"this-month": False}) == (None, None)


def test_date_range_options_adds_every_option():
    @click.command()
    @date_range_options
    def command(**kwargs):
        pass

    names = {param.name for param in command.params}
    assert names == {
        "start_date",
        "end_date",
        "this_month",
        "this_year",
        "last_month",
        "last_year",
    }
