import logging

import pytest

from admitsim.__main__ import main, parse_args
from admitsim.log_cfg import log_config


def test_cli_runs_a_seeded_simulation(capsys):
    exit_code = main(["--ticks", "20", "--seed", "4", "--max-connections", "2", "--quiet"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Maximum number of concurrent connections: 2" in out
    assert "Connected Users (" in out
    assert "Ticks: 20" in out


def test_cli_saves_plot(tmp_path, capsys):
    target = tmp_path / "occupancy.png"

    assert main(["--ticks", "5", "--seed", "1", "--quiet", "--plot", str(target)]) == 0
    assert target.exists()


def test_cli_rejects_bad_config(capsys):
    assert main(["--max-connections", "0"]) == 2
    assert "max_connections must be positive" in capsys.readouterr().err


def test_cli_logs_at_info_unless_verbose(capsys):
    assert main(["--ticks", "2", "--seed", "1", "--quiet"]) == 0
    assert log_config().console_level == logging.INFO

    assert main(["--ticks", "2", "--seed", "1", "--quiet", "--verbose"]) == 0
    assert log_config().console_level == logging.DEBUG


def test_arrival_priorities_accept_names_and_numbers():
    assert parse_args(["--arrival-priorities", "normal", "3"]).arrival_priorities == [2, 3]
    assert parse_args([]).arrival_priorities == (2, 3)


def test_unknown_priority_name_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["--arrival-priorities", "urgent", "3"])

    assert excinfo.value.code == 2
    assert "--arrival-priorities" in capsys.readouterr().err


def test_reversed_arrival_priorities_are_rejected(capsys):
    assert main(["--arrival-priorities", "LOW", "NORMAL"]) == 2
    assert "arrival_priorities" in capsys.readouterr().err
