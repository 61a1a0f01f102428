# spark_bootstrap/main_installer.py
# -*- coding: utf-8 -*-
"""
Main entry point and orchestrator for the Spark bootstrap action.

Handles argument parsing, logging setup, and runs the bootstrap steps in
order: fetch the manifest, select the record for this node, run the
versioned installer, then the optional Ganglia, maximize-config, classpath
and user-jar steps.
"""

import argparse
import functools
import logging
import sys
from typing import Callable, List, Optional, Sequence, Tuple

from bootstrap_common.command_utils import log_bootstrap
from bootstrap_common.file_utils import create_work_directory
from bootstrap_common.logging_config import setup_logging
from bootstrap_common.network_utils import (
    get_availability_zone,
    region_from_availability_zone,
)
from spark_bootstrap import config as static_config
from spark_bootstrap import install_steps
from spark_bootstrap.cli_handler import view_configuration
from spark_bootstrap.cluster_facts import gather_facts
from spark_bootstrap.config_loader import load_app_settings, options_from_args
from spark_bootstrap.config_models import AppSettings, BootstrapOptions
from spark_bootstrap.install_steps import BootstrapContext
from spark_bootstrap.state_manager import is_install_completed
from spark_bootstrap.step_executor import (
    FailurePolicy,
    StepOutcome,
    StepResult,
    execute_step,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

StepSpec = Tuple[str, str, Callable[[BootstrapContext], None], FailurePolicy]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Install Apache Spark on an Amazon EMR node.",
    )
    parser.add_argument("-c", dest="config_location", metavar="LOCATION",
                        help="Manifest location (default: the AWS manifest for this region).")
    parser.add_argument("-v", dest="requested_version", metavar="VERSION", default="",
                        help="Spark version to install.")
    parser.add_argument("-b", dest="build_id", metavar="BUILD", default="",
                        help="Build id passed to the installer.")
    parser.add_argument("-g", dest="install_ganglia", action="store_true",
                        help="Install Ganglia metrics for Spark.")
    parser.add_argument("-x", dest="maximize_config", action="store_true",
                        help="Size the Spark defaults to use the whole node.")
    parser.add_argument("-u", dest="user_jars_path", metavar="PATH",
                        help="Remote path of jars to put first on the Spark classpath.")
    parser.add_argument("-a", dest="assembly_first", action="store_true",
                        help="Put the Spark assembly jar first on the Spark classpath.")
    parser.add_argument("-l", dest="driver_log_level", metavar="LEVEL", default="INFO",
                        help="Spark driver log level (default: INFO).")
    parser.add_argument("-d", dest="dynamic_allocation", action="store_true",
                        help="Enable Spark dynamic allocation.")
    parser.add_argument("--settings-file", metavar="PATH",
                        help="YAML file overriding the bootstrap settings.")
    parser.add_argument("--sentinel-path", metavar="PATH",
                        help="Marker file recording a completed install.")
    parser.add_argument("--work-dir-parent", metavar="DIR",
                        help="Directory in which the working directory is created.")
    parser.add_argument("--log-prefix", metavar="PREFIX",
                        help="Prefix for console log lines.")
    parser.add_argument("--log-level", metavar="LEVEL",
                        help="Bootstrap log level (default: $LOGLEVEL or INFO).")
    parser.add_argument("--log-file", metavar="PATH",
                        help="Also write JSON logs to this file.")
    parser.add_argument("--json-logs", action="store_true",
                        help="Write console logs as JSON lines.")
    parser.add_argument("--view-config", action="store_true",
                        help="Show the effective configuration and exit.")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {static_config.SCRIPT_VERSION}")
    return parser


def plan_steps(options: BootstrapOptions) -> List[StepSpec]:
    """The ordered steps for this run, with their failure policies."""
    steps: List[StepSpec] = [
        ("FETCH_MANIFEST", "Fetch install manifest", install_steps.fetch_manifest, FailurePolicy.FATAL),
        ("SELECT_RECORD", "Select manifest entry", install_steps.select_record, FailurePolicy.FATAL),
        ("RUN_INSTALLER", "Run Spark installer", install_steps.run_installer, FailurePolicy.FATAL),
    ]
    if options.install_ganglia:
        steps.append(("GANGLIA", "Install Ganglia metrics", install_steps.install_ganglia, FailurePolicy.SOFT))
    if options.maximize_config:
        steps.append(("MAXIMIZE_CONFIG", "Maximize Spark config", install_steps.maximize_config, FailurePolicy.FATAL))
    if options.assembly_first:
        steps.append(("ASSEMBLY_FIRST", "Put assembly jar first on classpath",
                      install_steps.put_assembly_first, FailurePolicy.SOFT))
    if options.user_jars_path:
        steps.append(("USER_JARS", "Install user-provided jars", install_steps.install_user_jars, FailurePolicy.FATAL))
    return steps


def run_bootstrap(
    options: BootstrapOptions,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> int:
    """
    Run the whole bootstrap procedure.

    Returns:
        EXIT_SUCCESS if every fatal step succeeded (or Spark was already
        installed), EXIT_FAILURE otherwise.
    """
    logger_to_use = current_logger if current_logger else logger
    symbols = app_settings.symbols

    if is_install_completed(app_settings):
        log_bootstrap(
            f"{symbols.get('info', 'ℹ️')} Spark already installed ({app_settings.sentinel_path} exists). Nothing to do.",
            "info",
            logger_to_use,
            app_settings,
        )
        return EXIT_SUCCESS

    facts = gather_facts(app_settings, logger_to_use)
    ctx = BootstrapContext(
        options=options,
        settings=app_settings,
        facts=facts,
        work_dir=create_work_directory(app_settings, logger_to_use),
        logger=logger_to_use,
    )

    results: List[StepResult] = []
    for tag, description, step_function, policy in plan_steps(options):
        result = execute_step(
            tag,
            description,
            functools.partial(step_function, ctx),
            app_settings,
            policy=policy,
            current_logger=logger_to_use,
        )
        results.append(result)
        if result.is_fatal:
            log_bootstrap(
                f"{symbols.get('critical', '🔥')} Spark bootstrap aborted at {tag}. Working files kept in {ctx.work_dir}",
                "critical",
                logger_to_use,
                app_settings,
            )
            return EXIT_FAILURE

    soft_failures = [r.step_tag for r in results if r.outcome is StepOutcome.SOFT_FAILED]
    if soft_failures:
        log_bootstrap(
            f"{symbols.get('warning', '⚠️')} Spark bootstrap finished with non-fatal failures in: {', '.join(soft_failures)}",
            "warning",
            logger_to_use,
            app_settings,
        )
    else:
        log_bootstrap(
            f"{symbols.get('sparkles', '✨')} Spark bootstrap finished successfully.",
            "success",
            logger_to_use,
            app_settings,
        )
    return EXIT_SUCCESS


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    app_settings = load_app_settings(args, args.settings_file, logger)
    setup_logging(
        app_settings.log_prefix,
        log_level=args.log_level,
        json_format=args.json_logs,
        log_file_path=args.log_file,
    )
    options = options_from_args(args)

    if args.view_config:
        region = region_from_availability_zone(get_availability_zone(app_settings, logger))
        view_configuration(app_settings, options, region, logger)
        return EXIT_SUCCESS

    return run_bootstrap(options, app_settings, logger)


if __name__ == "__main__":
    sys.exit(main())
