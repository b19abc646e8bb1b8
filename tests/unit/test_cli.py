"""Smoke tests for the command-line interface."""

import pandas as pd
import pytest
from click.testing import CliRunner

from interfaces.cli import cli

MARKET = ["-S", "1.10", "-T", "1.0", "-r", "0.02", "-f", "0.01"]


@pytest.fixture
def runner():
    return CliRunner()


def test_price_closed_form(runner):
    """price prints the Garman-Kohlhagen value."""
    result = runner.invoke(cli, ["price", *MARKET, "-K", "1.10", "-v", "0.10"])
    assert result.exit_code == 0, result.output
    assert "Call Option Price (closed_form): 0.0488" in result.output


def test_price_monte_carlo(runner):
    """price accepts the Monte Carlo model with a seed."""
    result = runner.invoke(
        cli,
        ["price", *MARKET, "-K", "1.10", "-v", "0.10", "-t", "put", "-m", "monte_carlo",
         "--paths", "5000", "--seed", "3"],
    )
    assert result.exit_code == 0, result.output
    assert "Put Option Price (monte_carlo)" in result.output


def test_price_invalid_strike(runner):
    """Invalid inputs exit with an error message."""
    result = runner.invoke(cli, ["price", *MARKET, "-K", "-1", "-v", "0.10"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_forward(runner):
    """forward prints the parity forward rate."""
    result = runner.invoke(cli, ["forward", *MARKET])
    assert result.exit_code == 0, result.output
    assert "Forward Rate: 1.111055" in result.output


def test_barrier_closed_form(runner):
    """barrier prices a single knock-out by closed form."""
    result = runner.invoke(
        cli, ["barrier", *MARKET, "-K", "1.10", "-v", "0.10", "-b", "knock_out", "-H", "1.25"]
    )
    assert result.exit_code == 0, result.output
    assert "long call KO" in result.output
    assert "Method:    closed_form" in result.output


def test_barrier_reverse_double_falls_back(runner):
    """Reverse double barriers report the Monte Carlo fallback."""
    result = runner.invoke(
        cli,
        ["barrier", *MARKET, "-K", "1.10", "-v", "0.10", "-b", "double_knock_out", "--reverse",
         "-L", "1.0", "-U", "1.2", "--paths", "2000", "--steps", "20", "--seed", "1"],
    )
    assert result.exit_code == 0, result.output
    assert "Method:    monte_carlo" in result.output
    assert "Fallback" in result.output


def test_barrier_reverse_double_no_fallback(runner):
    """--no-fallback turns the unsupported combination into an error."""
    result = runner.invoke(
        cli,
        ["barrier", *MARKET, "-K", "1.10", "-v", "0.10", "-b", "double_knock_in", "--reverse",
         "-L", "1.0", "-U", "1.2", "--no-fallback"],
    )
    assert result.exit_code == 1
    assert "No closed form" in result.output


def test_barrier_missing_level(runner):
    """A knock-out without a barrier level is rejected."""
    result = runner.invoke(cli, ["barrier", *MARKET, "-K", "1.10", "-v", "0.10"])
    assert result.exit_code == 1


def test_strategy_collar(runner):
    """strategy prints legs, total premium and the curve summary."""
    result = runner.invoke(
        cli,
        ["strategy", "collar", *MARKET, "-v", "0.10", "--strike-upper", "105",
         "--strike-lower", "95"],
    )
    assert result.exit_code == 0, result.output
    assert "long call" in result.output
    assert "short put" in result.output
    assert "Total Premium" in result.output
    assert "Hedged rate incl. premium" in result.output


def test_strategy_csv_export(runner, tmp_path):
    """--csv writes one row per sweep point."""
    path = tmp_path / "curve.csv"
    result = runner.invoke(
        cli,
        ["strategy", "call", *MARKET, "-v", "0.10", "--strike-upper", "105", "--points", "25",
         "--csv", str(path)],
    )
    assert result.exit_code == 0, result.output
    frame = pd.read_csv(path)
    assert len(frame) == 25
    assert "hedged_rate_with_premium" in frame.columns


def test_strategy_missing_parameter(runner):
    """Templates without their levels exit with an error."""
    result = runner.invoke(cli, ["strategy", "seagull", *MARKET, "-v", "0.10"])
    assert result.exit_code == 1
    assert "requires" in result.output


def test_parity_closed_form(runner):
    """parity reports bounds, put-call parity and in/out parity for both types."""
    result = runner.invoke(cli, ["parity", *MARKET, "-K", "1.10", "-v", "0.10", "-H", "1.25"])
    assert result.exit_code == 0, result.output
    assert "Price bounds: OK" in result.output
    assert "Put-call parity: OK" in result.output
    assert "Barrier parity (call): OK" in result.output
    assert "Barrier parity (put): OK" in result.output


def test_parity_monte_carlo(runner):
    """Monte Carlo prices pass the checks within their standard errors."""
    result = runner.invoke(
        cli,
        ["parity", *MARKET, "-K", "1.10", "-v", "0.10", "-m", "monte_carlo",
         "--paths", "20000", "--seed", "5"],
    )
    assert result.exit_code == 0, result.output
    assert "Put-call parity: OK" in result.output


def test_parity_invalid_input(runner):
    """A non-positive spot exits with an error message."""
    result = runner.invoke(cli, ["parity", "-S", "-1", "-T", "1", "-r", "0.02", "-f", "0.01",
                                 "-K", "1.10", "-v", "0.10"])
    assert result.exit_code == 1
    assert "Error" in result.output
