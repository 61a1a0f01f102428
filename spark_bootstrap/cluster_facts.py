# spark_bootstrap/cluster_facts.py
# -*- coding: utf-8 -*-
"""
Gathers the facts about the cluster node that drive install selection:
Hadoop version, AMI version and EC2 region.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from bootstrap_common.command_utils import get_symbols, log_bootstrap
from bootstrap_common.network_utils import (
    get_availability_zone,
    region_from_availability_zone,
)
from spark_bootstrap import config as static_config
from spark_bootstrap.config_models import AppSettings

module_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AmiVersion:
    """An AMI version split on '.' into major, minor and patch parts."""

    major: str = ""
    minor: str = ""
    patch: str = ""

    @classmethod
    def parse(cls, version: str) -> "AmiVersion":
        parts = version.strip().split(".") if version.strip() else []
        parts += [""] * (3 - len(parts))
        return cls(parts[0], parts[1], parts[2])

    @property
    def major_minor(self) -> str:
        return f"{self.major}.{self.minor}" if self.minor else self.major


@dataclass
class EnvironmentFacts:
    hadoop_version: str = ""
    ami_version: str = ""
    availability_zone: str = ""
    region: str = ""
    ami: AmiVersion = field(init=False)

    def __post_init__(self) -> None:
        self.ami = AmiVersion.parse(self.ami_version)

    def manifest_ami_candidates(self) -> List[str]:
        """
        AMI keys to look up in the manifest, most specific first.

        An unknown AMI version only tries the "default" bucket.
        """
        candidates: List[str] = []
        if self.ami_version:
            candidates += [self.ami_version, self.ami.major_minor, self.ami.major]
        candidates.append("default")
        unique: List[str] = []
        for candidate in candidates:
            if candidate and candidate not in unique:
                unique.append(candidate)
        return unique


def read_state_field(path: Path, field_name: str) -> str:
    """
    Read a quoted field from a cluster state file.

    Handles both the JSON layout ("hadoopVersion": "2.4.0") and the text
    protobuf layout (amiVersion: "3.1.0") used by the EMR instance controller.
    Returns an empty string if the file or field is missing.
    """
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""
    match = re.search(
        rf'"?{re.escape(field_name)}"?\s*[:=]\s*"([^"]*)"', content
    )
    return match.group(1).strip() if match else ""


def infer_ami_version(hadoop_version: str) -> str:
    """Map a Hadoop version to the AMI that shipped it, for AMIs without amiVersion."""
    return static_config.HADOOP_TO_AMI_VERSIONS.get(hadoop_version, "")


def gather_facts(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> EnvironmentFacts:
    """
    Collect Hadoop version, AMI version and region for this node.

    Args:
        app_settings: Settings naming the cluster state files and metadata URL.
        current_logger: Logger to use. Defaults to the module logger.

    Returns:
        The gathered EnvironmentFacts. Unknown values are empty strings.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    hadoop_version = read_state_field(Path(app_settings.job_flow_file), "hadoopVersion")
    ami_version = read_state_field(Path(app_settings.job_flow_state_file), "amiVersion")

    if not ami_version:
        ami_version = infer_ami_version(hadoop_version)
        if ami_version:
            log_bootstrap(
                f"{symbols.get('info', 'ℹ️')} AMI version not recorded; inferred {ami_version} "
                f"from Hadoop {hadoop_version}",
                "info",
                logger_to_use,
                app_settings,
            )
        else:
            log_bootstrap(
                f"{symbols.get('warning', '⚠️')} Could not determine the AMI version "
                f"(Hadoop '{hadoop_version}'); only default manifest entries will match",
                "warning",
                logger_to_use,
                app_settings,
            )

    availability_zone = get_availability_zone(app_settings, logger_to_use)
    facts = EnvironmentFacts(
        hadoop_version=hadoop_version,
        ami_version=ami_version,
        availability_zone=availability_zone,
        region=region_from_availability_zone(availability_zone),
    )
    log_bootstrap(
        f"{symbols.get('info', 'ℹ️')} Hadoop version: '{facts.hadoop_version}', "
        f"AMI version: '{facts.ami_version}', region: '{facts.region}'",
        "info",
        logger_to_use,
        app_settings,
    )
    return facts
