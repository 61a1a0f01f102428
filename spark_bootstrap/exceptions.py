# spark_bootstrap/exceptions.py
# -*- coding: utf-8 -*-
"""
Errors raised by the bootstrap steps.
"""

from typing import Optional


class BootstrapError(Exception):
    """Base class for every bootstrap failure."""


class FetchError(BootstrapError):
    """A remote file or directory could not be copied to the node."""

    def __init__(self, location: str, reason: str):
        super().__init__(f"Could not fetch '{location}': {reason}")
        self.location = location
        self.reason = reason


class ManifestMatchError(BootstrapError):
    """No manifest line matched any of the candidate patterns."""

    def __init__(self, manifest_location: str, candidates: list):
        tried = ", ".join(repr(c) for c in candidates)
        super().__init__(
            f"No entry in '{manifest_location}' matches any of: {tried}"
        )
        self.manifest_location = manifest_location
        self.candidates = candidates


class InstallerError(BootstrapError):
    """A fetched script exited with a non-zero status."""

    def __init__(self, script: str, returncode: Optional[int]):
        super().__init__(f"Script '{script}' exited with status {returncode}")
        self.script = script
        self.returncode = returncode


class ConfigFileError(BootstrapError):
    """A local configuration file needed by a step is missing or unusable."""
