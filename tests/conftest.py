# tests/conftest.py
import logging
from unittest.mock import MagicMock

import pytest

from spark_bootstrap.config_models import AppSettings


@pytest.fixture
def app_settings(tmp_path):
    """AppSettings whose node paths all live under tmp_path."""
    spark_home = tmp_path / "spark"
    return AppSettings(
        sentinel_path=str(tmp_path / "state" / "spark-installed"),
        job_flow_file=str(tmp_path / "info" / "job-flow.json"),
        job_flow_state_file=str(tmp_path / "info" / "job-flow-state.txt"),
        work_dir_parent=str(tmp_path / "work"),
        spark_lib_dir=str(spark_home / "lib"),
        spark_env_file=str(spark_home / "conf" / "spark-env.sh"),
        user_jars_dir=str(spark_home / "classpath" / "user-provided"),
        symbols={
            "success": "✅", "error": "❌", "warning": "!",
            "info": "ℹ️", "gear": "⚙️", "step": "➡️",
        },
    )


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)
