"""Tests for the command-line interface."""

import textwrap

from click.testing import CliRunner

from channel_rating.cli import cli


def test_rate(scan_csv) -> None:
    result = CliRunner().invoke(cli, ["rate", str(scan_csv)])

    assert result.exit_code == 0, result.output
    assert "Loaded 4 observations, 4 distinct access points." in result.output
    rows = [line.split() for line in result.output.splitlines() if line.strip()[:1].isdigit()]
    assert [row[0] for row in rows][:5] == ["1", "2", "12", "13", "14"]
    assert rows[-1][0] == "7"


def test_rate_output(scan_csv, tmp_path) -> None:
    out = tmp_path / "ratings.csv"
    result = CliRunner().invoke(cli, ["rate", str(scan_csv), "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8").splitlines()[1] == "1,2412,0,ZERO,5"


def test_recommend_with_country(scan_csv) -> None:
    result = CliRunner().invoke(
        cli, ["recommend", str(scan_csv), "--country", "US", "--limit", "2"]
    )

    assert result.exit_code == 0, result.output
    rows = [line.split() for line in result.output.splitlines() if line.strip()[:1].isdigit()]
    assert [row[0] for row in rows] == ["1", "2"]


def test_recommend_nothing_quiet(tmp_path) -> None:
    p = tmp_path / "busy.csv"
    # one 160 MHz network at -40 dBm covers the whole 2.4 GHz band
    p.write_text("a,aa:aa:aa:aa:aa:01,,2442,2442,160,-40\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["recommend", str(p), "--band", "2.4GHz"])

    assert result.exit_code == 0, result.output
    assert "No channel is quiet enough to recommend." in result.output


def test_unknown_band(scan_csv) -> None:
    result = CliRunner().invoke(cli, ["rate", str(scan_csv), "--band", "60GHz"])

    assert result.exit_code != 0
    assert "Unknown band" in result.output


def test_bad_band_plan(scan_csv, tmp_path) -> None:
    plan = tmp_path / "plan.yaml"
    plan.write_text("bands: []\nstrength_thresholds: []\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["rate", str(scan_csv), "--band-plan", str(plan)])

    assert result.exit_code != 0
    assert "'bands' is empty" in result.output


def test_country_entry_not_mapping(scan_csv, tmp_path) -> None:
    plan = tmp_path / "plan.yaml"
    plan.write_text(textwrap.dedent("""\
        bands:
        - name: 2.4GHz
          frequency_range: [2400, 2499]
          channel_sets:
          - first_channel: 1
            last_channel: 11
            first_frequency: 2412
        strength_thresholds: []
        countries:
          US: [1, 2]
    """), encoding="utf-8")

    result = CliRunner().invoke(cli, ["rate", str(scan_csv), "--band-plan", str(plan)])

    assert result.exit_code == 1
    assert "country US must map band names" in result.output


def test_recommend_negative_limit(scan_csv) -> None:
    result = CliRunner().invoke(cli, ["recommend", str(scan_csv), "--limit", "-1"])

    assert result.exit_code == 2
    assert "--limit" in result.output


def test_custom_band_plan(scan_csv, tmp_path) -> None:
    plan = tmp_path / "plan.yaml"
    plan.write_text(textwrap.dedent("""\
        bands:
        - name: 2.4GHz
          frequency_range: [2400, 2499]
          channel_sets:
          - first_channel: 1
            last_channel: 11
            first_frequency: 2412
        strength_thresholds:
        - level: -88
          strength: ONE
    """), encoding="utf-8")

    result = CliRunner().invoke(cli, ["rate", str(scan_csv), "--band-plan", str(plan)])

    assert result.exit_code == 0, result.output
    assert "Loaded band plan with 1 bands." in result.output
    rows = [line for line in result.output.splitlines() if line.strip()[:1].isdigit()]
    assert len(rows) == 11


def test_merge_virtual(tmp_path) -> None:
    p = tmp_path / "virtual.csv"
    p.write_text(
        "a,20:cf:30:ce:1d:71,,2432,2432,20,-50\n"
        "b,22:cf:30:ce:1d:72,,2432,2432,20,-55\n",
        encoding="utf-8",
    )

    result = CliRunner().invoke(cli, ["rate", str(p), "--merge-virtual"])

    assert result.exit_code == 0, result.output
    assert "Loaded 2 observations, 1 distinct access points." in result.output


def test_plot_to_file(scan_csv, tmp_path) -> None:
    out = tmp_path / "graph.html"

    result = CliRunner().invoke(
        cli, ["plot", str(scan_csv), "--mode", "graph", "--no-show", "--output", str(out)]
    )

    assert result.exit_code == 0, result.output
    assert out.exists()


def test_missing_scan(tmp_path) -> None:
    result = CliRunner().invoke(cli, ["rate", str(tmp_path / "missing.csv")])
    assert result.exit_code != 0
