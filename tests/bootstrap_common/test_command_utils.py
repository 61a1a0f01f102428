# tests/bootstrap_common/test_command_utils.py
# -*- coding: utf-8 -*-
import subprocess
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from bootstrap_common.command_utils import get_symbols, log_bootstrap, run_command
from spark_bootstrap.config_models import SYMBOLS_DEFAULT


@pytest.mark.parametrize(
    "level, method",
    [
        ("debug", "debug"),
        ("info", "info"),
        ("success", "info"),
        ("warning", "warning"),
        ("error", "error"),
        ("critical", "critical"),
    ],
)
def test_log_bootstrap_dispatches_levels(mock_logger, level, method):
    log_bootstrap("hello", level, mock_logger)
    getattr(mock_logger, method).assert_called_once_with("hello", exc_info=False)


def test_get_symbols_falls_back_to_defaults():
    assert get_symbols(None) == SYMBOLS_DEFAULT


def test_run_command_success(mocker: MockerFixture, mock_logger, app_settings):
    """A successful command returns the CompletedProcess and logs what ran."""
    completed = subprocess.CompletedProcess(["echo", "hi"], 0, stdout="hi\n", stderr="")
    mock_run = mocker.patch("subprocess.run", return_value=completed)

    result = run_command(
        ["echo", "hi"], app_settings, capture_output=True, current_logger=mock_logger
    )

    assert result is completed
    mock_run.assert_called_once_with(
        ["echo", "hi"],
        check=True,
        capture_output=True,
        text=True,
        cwd=None,
        env=None,
    )
    mock_logger.info.assert_any_call("⚙️ Executing: echo hi", exc_info=False)
    mock_logger.debug.assert_called_with("   stdout: hi", exc_info=False)


def test_run_command_logs_working_directory(mocker: MockerFixture, mock_logger, app_settings):
    mocker.patch("subprocess.run", return_value=subprocess.CompletedProcess(["ls"], 0))

    run_command(["ls", "-l"], app_settings, current_logger=mock_logger, cwd="/tmp/work")

    mock_logger.info.assert_called_once_with("⚙️ Executing: ls -l (in /tmp/work)", exc_info=False)


def test_run_command_failure_is_logged_and_raised(
    mocker: MockerFixture, mock_logger, app_settings
):
    error = subprocess.CalledProcessError(3, ["false"], stderr="boom")
    mocker.patch("subprocess.run", side_effect=error)

    with pytest.raises(subprocess.CalledProcessError):
        run_command(["false"], app_settings, current_logger=mock_logger)

    mock_logger.error.assert_any_call("❌ Command `false` failed (rc 3).", exc_info=False)
    mock_logger.error.assert_any_call("   stderr: boom", exc_info=False)


def test_run_command_missing_binary(mocker: MockerFixture, mock_logger, app_settings):
    error = FileNotFoundError(2, "No such file", "nope")
    mocker.patch("subprocess.run", side_effect=error)

    with pytest.raises(FileNotFoundError):
        run_command(["nope"], app_settings, current_logger=mock_logger)

    mock_logger.error.assert_called_once_with(
        "❌ Command not found: nope. Ensure it's installed and in PATH.",
        exc_info=False,
    )


def test_run_command_passes_env_and_cwd(mocker: MockerFixture, app_settings):
    mock_run = mocker.patch(
        "subprocess.run", return_value=MagicMock(returncode=0, stdout="")
    )

    run_command(["env"], app_settings, cwd="/tmp", env={"A": "1"})

    assert mock_run.call_args.kwargs["cwd"] == "/tmp"
    assert mock_run.call_args.kwargs["env"] == {"A": "1"}
