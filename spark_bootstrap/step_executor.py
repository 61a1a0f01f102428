# spark_bootstrap/step_executor.py
# -*- coding: utf-8 -*-
"""
Provides functionality to execute individual bootstrap steps.

Each step is run with a failure policy. A FATAL step that fails stops the
bootstrap with a non-zero exit code; a SOFT step that fails is logged and the
bootstrap carries on.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from bootstrap_common.command_utils import get_symbols, log_bootstrap
from spark_bootstrap.config_models import AppSettings
from spark_bootstrap.exceptions import BootstrapError

module_logger = logging.getLogger(__name__)


class FailurePolicy(enum.Enum):
    FATAL = "fatal"
    SOFT = "soft"


class StepOutcome(enum.Enum):
    COMPLETED = "completed"
    SOFT_FAILED = "soft_failed"
    FATAL = "fatal"


@dataclass(frozen=True)
class StepResult:
    step_tag: str
    outcome: StepOutcome
    message: str = ""
    error: Optional[BaseException] = None

    @property
    def is_fatal(self) -> bool:
        return self.outcome is StepOutcome.FATAL


def execute_step(
    step_tag: str,
    step_description: str,
    step_function: Callable[[], Any],
    app_settings: AppSettings,
    policy: FailurePolicy = FailurePolicy.FATAL,
    current_logger: Optional[logging.Logger] = None,
) -> StepResult:
    """
    Execute a single bootstrap step.

    Args:
        step_tag: A unique string identifier for the step.
        step_description: A human-readable description of the step.
        step_function: Zero-argument callable doing the work. It signals failure by
                       raising BootstrapError or OSError.
        app_settings: The bootstrap settings object.
        policy: What a failure of this step means for the whole bootstrap.
        current_logger: The logger instance to use.

    Returns:
        A StepResult describing the outcome. Failures are reported as
        SOFT_FAILED or FATAL according to `policy`.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    log_bootstrap(
        f"--- {symbols.get('step', '➡️')} Executing: {step_description} ({step_tag}) ---",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        step_function()
    except (BootstrapError, OSError) as e:
        if policy is FailurePolicy.SOFT:
            log_bootstrap(
                f"{symbols.get('warning', '⚠️')} {step_description} ({step_tag}) failed, continuing: {e}",
                "warning",
                logger_to_use,
                app_settings,
            )
            return StepResult(step_tag, StepOutcome.SOFT_FAILED, str(e), e)
        log_bootstrap(
            f"{symbols.get('error', '❌')} FAILED: {step_description} ({step_tag}): {e}",
            "error",
            logger_to_use,
            app_settings,
        )
        return StepResult(step_tag, StepOutcome.FATAL, str(e), e)

    log_bootstrap(
        f"--- {symbols.get('success', '✅')} Successfully completed: {step_description} ({step_tag}) ---",
        "success",
        logger_to_use,
        app_settings,
    )
    return StepResult(step_tag, StepOutcome.COMPLETED)
