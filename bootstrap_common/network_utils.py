# bootstrap_common/network_utils.py
# -*- coding: utf-8 -*-
"""
Network-related utility functions: fetching remote files onto the node and
querying the EC2 instance metadata service.
"""

import logging
import re
import subprocess
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

from spark_bootstrap.config_models import AppSettings
from spark_bootstrap.exceptions import FetchError

from .command_utils import get_symbols, log_bootstrap, run_command

module_logger = logging.getLogger(__name__)

HTTP_SCHEMES = ("http", "https")


def is_http_location(location: str) -> bool:
    return urlparse(location).scheme.lower() in HTTP_SCHEMES


def location_basename(location: str) -> str:
    """Return the last path component of a URL or path, ignoring a trailing slash."""
    path = urlparse(location).path if "://" in location else location
    name = path.rstrip("/").rsplit("/", 1)[-1]
    return name or "download"


def region_from_availability_zone(availability_zone: str) -> str:
    """
    Derive the region from an availability zone by stripping the zone letter.

    "us-west-2a" becomes "us-west-2". An empty zone gives an empty region.
    """
    return re.sub(r"[a-z]+$", "", availability_zone.strip())


def _download_http(
    url: str,
    destination: Path,
    app_settings: AppSettings,
) -> None:
    response: Optional[requests.Response] = None
    try:
        response = requests.get(url, stream=True, timeout=app_settings.http_timeout)
        response.raise_for_status()
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    f.write(chunk)
    except requests.exceptions.HTTPError as http_err:
        status_code = response.status_code if response is not None else "Unknown"
        raise FetchError(url, f"HTTP error {status_code}: {http_err}") from http_err
    except requests.exceptions.RequestException as req_err:
        raise FetchError(url, str(req_err)) from req_err
    except OSError as io_err:
        raise FetchError(url, f"could not write {destination}: {io_err}") from io_err


def _hadoop_get(
    source: str,
    destination: Path,
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> None:
    try:
        run_command(
            [app_settings.hadoop_command, "fs", "-get", source, str(destination)],
            app_settings,
            capture_output=True,
            current_logger=logger_to_use,
        )
    except subprocess.CalledProcessError as e:
        raise FetchError(source, f"hadoop fs -get exited with status {e.returncode}") from e
    except FileNotFoundError as e:
        raise FetchError(source, f"'{app_settings.hadoop_command}' is not installed") from e


def fetch_remote_file(
    location: str,
    destination_dir: Path,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Copy a single remote file into a local directory.

    HTTP(S) locations are downloaded with requests. Every other location
    (s3://, hdfs://, file:// or a plain path) goes through `hadoop fs -get`,
    which understands the cluster's configured filesystems.

    Args:
        location: Remote location of the file.
        destination_dir: Existing local directory to copy into.
        app_settings: Bootstrap settings (timeouts, hadoop command, symbols).
        current_logger: Logger to use. Defaults to the module logger.

    Returns:
        The local path of the fetched file.

    Raises:
        FetchError: If the file could not be fetched.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    destination = destination_dir / location_basename(location)

    log_bootstrap(
        f"{symbols.get('package', '📦')} Fetching {location} to {destination}",
        "info",
        logger_to_use,
        app_settings,
    )
    if is_http_location(location):
        _download_http(location, destination, app_settings)
    else:
        _hadoop_get(location, destination, app_settings, logger_to_use)

    if not destination.is_file():
        raise FetchError(location, f"nothing was written to {destination}")
    return destination


def fetch_remote_directory(
    location: str,
    destination_dir: Path,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Copy every object under a remote path into a local directory.

    Raises:
        FetchError: If the copy fails or the location is HTTP(S), which has no listing.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if is_http_location(location):
        raise FetchError(location, "HTTP locations cannot be copied as a directory")

    destination_dir.mkdir(parents=True, exist_ok=True)
    source = location.rstrip("/") + "/*"
    log_bootstrap(
        f"{get_symbols(app_settings).get('package', '📦')} Copying {source} to {destination_dir}",
        "info",
        logger_to_use,
        app_settings,
    )
    _hadoop_get(source, destination_dir, app_settings, logger_to_use)


def get_availability_zone(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Ask the instance metadata service for this node's availability zone.

    Returns:
        The availability zone, or an empty string if the service did not answer.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    try:
        response = requests.get(
            app_settings.availability_zone_url, timeout=app_settings.http_timeout
        )
        response.raise_for_status()
        return response.text.strip()
    except requests.exceptions.RequestException as e:
        log_bootstrap(
            f"{symbols.get('warning', '⚠️')} Could not read availability zone from "
            f"{app_settings.availability_zone_url}: {e}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return ""
