# spark_bootstrap/manifest.py
# -*- coding: utf-8 -*-
"""
Parsing and lookup of the Spark install manifest.

The manifest is tab-delimited text with one record per line:

    ami  spark-version  interpreter  install-script  binaries  max-config  ganglia  scala

The first two fields select the record; the others say how to install it.
Blank lines and lines starting with '#' are ignored.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from bootstrap_common.command_utils import get_symbols, log_bootstrap
from spark_bootstrap.config_models import AppSettings
from spark_bootstrap.exceptions import ManifestMatchError

module_logger = logging.getLogger(__name__)

FIELD_COUNT = 8


@dataclass(frozen=True)
class ConfigurationRecord:
    ami_pattern: str
    spark_version: str
    interpreter: str
    install_script: str
    binaries_location: str
    max_config_script: str = ""
    ganglia_script: str = ""
    scala_binaries_location: str = ""

    @classmethod
    def from_line(cls, line: str) -> "ConfigurationRecord":
        """Build a record from one manifest line, padding missing fields with ''."""
        values = [value.strip() for value in line.rstrip("\r\n").split("\t")]
        values = (values + [""] * FIELD_COUNT)[:FIELD_COUNT]
        return cls(*values)


def iter_manifest_lines(text: str) -> Iterable[str]:
    for line in text.splitlines():
        stripped = line.rstrip("\r")
        if not stripped.strip() or stripped.lstrip().startswith("#"):
            continue
        yield stripped


def candidate_keys(
    ami_candidates: Sequence[str], requested_version: str
) -> List[Tuple[str, str]]:
    """Pair each AMI key with the requested version, in priority order."""
    return [(ami_key, requested_version) for ami_key in ami_candidates]


def _line_matches(record: ConfigurationRecord, ami_key: str, requested_version: str) -> bool:
    if record.ami_pattern != ami_key:
        return False
    # Without a requested version the first line of the AMI bucket wins.
    return not requested_version or record.spark_version == requested_version


def find_record(
    manifest_text: str,
    ami_candidates: Sequence[str],
    requested_version: str,
) -> Optional[ConfigurationRecord]:
    """
    Return the first record matching the highest-priority candidate.

    Candidates are tried in order; within a candidate the earliest manifest
    line wins. Returns None if nothing matches.
    """
    records = [ConfigurationRecord.from_line(line) for line in iter_manifest_lines(manifest_text)]
    for ami_key, version in candidate_keys(ami_candidates, requested_version):
        for record in records:
            if _line_matches(record, ami_key, version):
                return record
    return None


def resolve_record(
    manifest_path: Path,
    manifest_location: str,
    ami_candidates: Sequence[str],
    requested_version: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> ConfigurationRecord:
    """
    Read a fetched manifest and select the record for this node.

    Raises:
        ManifestMatchError: If no line matches any candidate.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    manifest_text = manifest_path.read_text(encoding="utf-8", errors="replace")

    record = find_record(manifest_text, ami_candidates, requested_version)
    if record is None:
        raise ManifestMatchError(
            manifest_location,
            [f"{ami}\t{version}" for ami, version in candidate_keys(ami_candidates, requested_version)],
        )

    log_bootstrap(
        f"{symbols.get('success', '✅')} Selected manifest entry AMI '{record.ami_pattern}', "
        f"Spark '{record.spark_version}' -> {record.install_script}",
        "success",
        logger_to_use,
        app_settings,
    )
    return record
