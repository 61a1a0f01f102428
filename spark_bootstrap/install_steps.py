# spark_bootstrap/install_steps.py
# -*- coding: utf-8 -*-
"""
The individual steps of the Spark bootstrap action.

Every step takes the BootstrapContext, does its work, records anything later
steps need on the context, and raises a BootstrapError subclass on failure.
Whether a failure is fatal is decided by the caller through the step's
FailurePolicy.
"""

import logging
import os
import stat
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from bootstrap_common.command_utils import get_symbols, log_bootstrap, run_command
from bootstrap_common.file_utils import find_first_file
from bootstrap_common.network_utils import fetch_remote_directory, fetch_remote_file
from spark_bootstrap import aws_defaults
from spark_bootstrap import config as static_config
from spark_bootstrap.cluster_facts import EnvironmentFacts
from spark_bootstrap.config_models import AppSettings, BootstrapOptions
from spark_bootstrap.exceptions import ConfigFileError, InstallerError
from spark_bootstrap.manifest import ConfigurationRecord, resolve_record
from spark_bootstrap.spark_env import prepend_to_classpath
from spark_bootstrap.state_manager import mark_install_completed

module_logger = logging.getLogger(__name__)


@dataclass
class BootstrapContext:
    """Everything the steps share during one bootstrap run."""

    options: BootstrapOptions
    settings: AppSettings
    facts: EnvironmentFacts
    work_dir: Path
    logger: logging.Logger = field(default=module_logger)
    manifest_location: str = ""
    manifest_path: Optional[Path] = None
    record: Optional[ConfigurationRecord] = None
    installer_env: Dict[str, str] = field(default_factory=dict)

    def require_record(self) -> ConfigurationRecord:
        if self.record is None:
            raise RuntimeError("No manifest record has been selected yet")
        return self.record


def build_installer_env(ctx: BootstrapContext) -> Dict[str, str]:
    """Variables handed to the installer and the optional scripts."""
    record = ctx.require_record()
    region = ctx.facts.region
    return {
        static_config.ENV_BINARIES_LOCATION: record.binaries_location,
        static_config.ENV_BUILD_ID: ctx.options.build_id,
        static_config.ENV_REGION: region,
        static_config.ENV_SCALA_LOCATION: record.scala_binaries_location
        or aws_defaults.default_scala_location(region, ctx.settings),
        static_config.ENV_DRIVER_LOG_LEVEL: ctx.options.driver_log_level,
        static_config.ENV_DYNAMIC_ALLOCATION: "1" if ctx.options.dynamic_allocation else "0",
        static_config.ENV_EC2_SIZING_LOCATION: aws_defaults.default_ec2_sizing_location(
            region, ctx.settings
        ),
    }


def _run_script(ctx: BootstrapContext, command: List[str]) -> None:
    env = dict(os.environ)
    env.update(ctx.installer_env)
    try:
        run_command(
            command,
            ctx.settings,
            check=True,
            current_logger=ctx.logger,
            cwd=str(ctx.work_dir),
            env=env,
        )
    except subprocess.CalledProcessError as e:
        raise InstallerError(command[-1], e.returncode) from e
    except FileNotFoundError as e:
        raise InstallerError(command[-1], None) from e


def _make_executable(path: Path) -> None:
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def fetch_manifest(ctx: BootstrapContext) -> None:
    ctx.manifest_location = ctx.options.config_location or aws_defaults.default_manifest_location(
        ctx.facts.region, ctx.settings
    )
    ctx.manifest_path = fetch_remote_file(
        ctx.manifest_location, ctx.work_dir, ctx.settings, ctx.logger
    )


def select_record(ctx: BootstrapContext) -> None:
    if ctx.manifest_path is None:
        raise RuntimeError("The manifest has not been fetched")
    ctx.record = resolve_record(
        ctx.manifest_path,
        ctx.manifest_location,
        ctx.facts.manifest_ami_candidates(),
        ctx.options.requested_version,
        ctx.settings,
        ctx.logger,
    )


def run_installer(ctx: BootstrapContext) -> None:
    """Fetch and run the versioned installer, then write the sentinel."""
    record = ctx.require_record()
    script = fetch_remote_file(record.install_script, ctx.work_dir, ctx.settings, ctx.logger)
    ctx.installer_env = build_installer_env(ctx)
    interpreter = record.interpreter or ctx.settings.default_interpreter
    _run_script(ctx, [interpreter, str(script)])
    mark_install_completed(
        ctx.settings,
        ami_version=ctx.facts.ami_version,
        spark_version=record.spark_version,
        current_logger=ctx.logger,
    )


def _fetch_and_run_optional_script(ctx: BootstrapContext, location: str) -> None:
    script = fetch_remote_file(location, ctx.work_dir, ctx.settings, ctx.logger)
    _make_executable(script)
    _run_script(ctx, [str(script)])


def install_ganglia(ctx: BootstrapContext) -> None:
    record = ctx.require_record()
    location = record.ganglia_script or aws_defaults.default_ganglia_script(
        ctx.facts.region, ctx.settings
    )
    _fetch_and_run_optional_script(ctx, location)


def maximize_config(ctx: BootstrapContext) -> None:
    record = ctx.require_record()
    location = record.max_config_script or aws_defaults.default_max_config_script(
        ctx.facts.region, ctx.settings
    )
    _fetch_and_run_optional_script(ctx, location)


def put_assembly_first(ctx: BootstrapContext) -> None:
    """Move the Spark assembly jar to the front of the Spark classpath."""
    lib_dir = Path(ctx.settings.spark_lib_dir)
    assembly_jar = find_first_file(lib_dir, ctx.settings.assembly_jar_glob)
    if assembly_jar is None:
        raise ConfigFileError(
            f"No jar matching '{ctx.settings.assembly_jar_glob}' in {lib_dir}"
        )
    prepend_to_classpath(
        Path(ctx.settings.spark_env_file), str(assembly_jar), ctx.settings, ctx.logger
    )


def install_user_jars(ctx: BootstrapContext) -> None:
    """Copy the user's jars onto the node and put them first on the Spark classpath."""
    source = ctx.options.user_jars_path
    if not source:
        raise RuntimeError("install_user_jars called without a user jar path")
    jars_dir = Path(ctx.settings.user_jars_dir)
    fetch_remote_directory(source, jars_dir, ctx.settings, ctx.logger)
    log_bootstrap(
        f"{get_symbols(ctx.settings).get('success', '✅')} Copied user jars from {source} to {jars_dir}",
        "success",
        ctx.logger,
        ctx.settings,
    )
    prepend_to_classpath(
        Path(ctx.settings.spark_env_file), f"{jars_dir}/*", ctx.settings, ctx.logger
    )
