"""Tests for the command-line interface"""

import csv
import json

import pytest
from click.testing import CliRunner

from mortgage_calc.formatter import BREAK_EVEN, SCHEDULE_HEADER
from mortgage_calc.main import cli

LOAN_ARGS = ["-p", "200000", "-i", "3", "--ay", "30"]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_payment_prints_every_frequency(runner):
    result = runner.invoke(cli, ["payment", *LOAN_ARGS])

    assert result.exit_code == 0, result.output
    assert "Principal:              200000.00" in result.output
    assert "Payment (Monthly):" in result.output
    assert "843.21" in result.output
    assert "Payment (Bi-Weekly):" in result.output
    assert "Payment (Weekly):" in result.output


def test_purchase_and_down_payment_set_principal(runner):
    result = runner.invoke(cli, ["payment", "-s", "500k", "-d", "20", "--ay", "25"])

    assert result.exit_code == 0, result.output
    assert "Principal:              400000.00" in result.output


def test_amortization_months(runner):
    result = runner.invoke(cli, ["payment", "-p", "200000", "--am", "360"])

    assert result.exit_code == 0, result.output
    assert "Amortization (Years):   30" in result.output


def test_amortization_months_must_be_whole_years(runner):
    result = runner.invoke(cli, ["payment", "-p", "200000", "--am", "100"])

    assert result.exit_code == 2
    assert "whole number of years" in result.output


def test_missing_term_is_rejected(runner):
    result = runner.invoke(cli, ["payment", "-p", "100000"])

    assert result.exit_code == 2
    assert "Amortization must be at least one year" in result.output


def test_bad_amount_is_rejected(runner):
    result = runner.invoke(cli, ["schedule", "-p", "lots", "--ay", "30"])

    assert result.exit_code == 2
    assert "Invalid amount" in result.output


def test_options_from_environment(runner):
    result = runner.invoke(
        cli, ["payment", "--ay", "30"], env={"MORTGAGE_PAYMENT_PRINCIPAL": "200000"}
    )

    assert result.exit_code == 0, result.output
    assert "843.21" in result.output


def test_schedule_table_with_limit(runner):
    result = runner.invoke(cli, ["schedule", "-p", "300000", "-i", "4.5", "--ay", "30", "-n", "3"])

    assert result.exit_code == 0, result.output
    assert SCHEDULE_HEADER in result.output
    rows = [line for line in result.output.splitlines() if line[:6].strip().isdigit()]
    assert [row.split("|")[0].strip() for row in rows] == ["1", "2", "3"]
    assert rows[0].split("|")[3].strip() == "1520.06"
    assert rows[0].split("|")[6].strip() == "1125.00"
    assert rows[0].split("|")[7].strip() == "299604.94"
    assert BREAK_EVEN not in result.output


def test_schedule_marks_break_even(runner):
    result = runner.invoke(cli, ["schedule", "-p", "12000", "-i", "0", "--ay", "1"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines.count(BREAK_EVEN) == 2
    first_row = lines.index(BREAK_EVEN) + 1
    assert lines[first_row].startswith("     1 |")
    assert lines[first_row + 1] == BREAK_EVEN
    assert "Payments:    12000.00" in result.output
    assert "Total:       12000.00" in result.output


def test_schedule_json_export(runner, tmp_path):
    path = tmp_path / "schedule.json"
    result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--output", str(path)])

    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text(encoding="utf-8"))
    assert len(data["schedule"]) == 360
    assert data["summary"]["payments_made"] == 360
    assert data["summary"]["payment"] == pytest.approx(843.21, abs=0.005)
    assert data["schedule"][-1]["balance"] == pytest.approx(0, abs=1e-6)


def test_schedule_csv_export_with_extra_payment(runner, tmp_path):
    path = tmp_path / "schedule.csv"
    result = runner.invoke(
        cli, ["schedule", "-p", "100000", "-i", "5", "--ay", "30", "--ep", "200", "-f", str(path)]
    )

    assert result.exit_code == 0, result.output
    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "Period"
    assert 1 < len(rows) < 361
    assert float(rows[1][4]) == 200.0


def test_schedule_text_file(runner, tmp_path):
    path = tmp_path / "schedule.txt"
    result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--weekly", "-f", str(path)])

    assert result.exit_code == 0, result.output
    assert f"Schedule exported to {path}" in result.output
    text = path.read_text(encoding="utf-8")
    assert SCHEDULE_HEADER in text
    assert "Principal:              200000.00" in text


def test_summary_for_biweekly(runner):
    result = runner.invoke(cli, ["summary", *LOAN_ARGS, "--biweekly"])

    assert result.exit_code == 0, result.output
    assert "Frequency          : biweekly" in result.output
    assert "Periods saved" in result.output


def test_summary_json_only(runner, tmp_path):
    result = runner.invoke(cli, ["summary", *LOAN_ARGS, "-f", str(tmp_path / "summary.txt")])

    assert result.exit_code == 2
    assert ".json" in result.output


def test_compare(runner):
    result = runner.invoke(cli, ["compare", *LOAN_ARGS])

    assert result.exit_code == 0, result.output
    header = result.output.splitlines()[2]
    assert "monthly" in header and "biweekly" in header and "weekly" in header
    assert "total_interest" in result.output


def test_verbose_logs_to_stderr(runner):
    result = runner.invoke(cli, ["-v", "payment", *LOAN_ARGS])

    assert result.exit_code == 0, result.output
    assert "mortgage_calc.engine" in result.stderr
    assert "payment for" in result.stderr
    assert "payment for" not in result.stdout
    assert "843.21" in result.stdout


def test_quiet_by_default(runner):
    result = runner.invoke(cli, ["payment", *LOAN_ARGS])

    assert result.exit_code == 0, result.output
    assert "DEBUG" not in result.stderr


def test_huge_amount_is_rejected(runner):
    result = runner.invoke(cli, ["payment", "-p", "9e999999k", "--ay", "30"])

    assert result.exit_code == 2
    assert "Amount out of range" in result.output


def test_schedule_single_period(runner):
    result = runner.invoke(cli, ["schedule", "-p", "12000", "-i", "0", "--ay", "1", "--period", "2"])

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [
        "Year / Period: 01/02",
        "Value:         10000.00",
        "Payment:       1000.00",
        "Extra:         0.00",
        "Principal:     1000.00",
        "Interest:      0.00",
    ]


def test_schedule_period_out_of_range(runner):
    result = runner.invoke(cli, ["schedule", "-p", "12000", "-i", "0", "--ay", "1", "--period", "13"])

    assert result.exit_code == 2
    assert "Period must be between 1 and 12" in result.output


@pytest.mark.parametrize(
    "args, expected",
    [
        (["-p", "12000", "-i", "0", "--ay", "1", "-m", "6"], "Balance after 6 months: 6000.00"),
        ([*LOAN_ARGS, "-m", "0"], "Balance after 0 months: 200000.00"),
        ([*LOAN_ARGS, "-m", "360"], "Balance after 360 months: 0.00"),
    ],
)
def test_balance(runner, args, expected):
    result = runner.invoke(cli, ["balance", *args])

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == expected


def test_balance_rejects_negative_months(runner):
    result = runner.invoke(cli, ["balance", *LOAN_ARGS, "-m", "-1"])

    assert result.exit_code == 2
