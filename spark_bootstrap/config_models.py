# spark_bootstrap/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for the bootstrap action configuration.

This module defines the structured settings for the bootstrap action,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spark_bootstrap import config as static_config

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️",
    "step": "➡️", "gear": "⚙️", "package": "📦", "rocket": "🚀",
    "sparkles": "✨", "critical": "🔥", "debug": "🐛",
}

DRIVER_LOG_LEVELS = ("ALL", "TRACE", "DEBUG", "INFO", "WARN", "ERROR", "FATAL", "OFF")


class AppSettings(BaseSettings):
    """Main bootstrap settings. Every field can be overridden with SPARK_BOOTSTRAP_<FIELD>."""
    model_config = SettingsConfigDict(
        env_prefix="SPARK_BOOTSTRAP_",
        extra="ignore",
    )

    sentinel_path: str = Field(default=static_config.SENTINEL_PATH_DEFAULT,
                               description="Marker file written once the Spark install succeeded.")
    job_flow_file: str = Field(default=static_config.JOB_FLOW_FILE_DEFAULT,
                               description="Cluster metadata file holding the hadoopVersion field.")
    job_flow_state_file: str = Field(default=static_config.JOB_FLOW_STATE_FILE_DEFAULT,
                                     description="Cluster state file holding the amiVersion field.")
    availability_zone_url: str = Field(default=static_config.AVAILABILITY_ZONE_URL_DEFAULT,
                                       description="Instance metadata endpoint returning the availability zone.")
    http_timeout: int = Field(default=120, description="Timeout in seconds for HTTP fetches.")
    work_dir_parent: str = Field(default=static_config.WORK_DIR_PARENT_DEFAULT,
                                 description="Directory under which the temporary work directory is created.")

    spark_lib_dir: str = Field(default=static_config.SPARK_LIB_DIR_DEFAULT,
                               description="Directory holding the Spark assembly jar.")
    assembly_jar_glob: str = Field(default=static_config.ASSEMBLY_JAR_GLOB_DEFAULT,
                                   description="Filename pattern of the Spark assembly jar.")
    spark_env_file: str = Field(default=static_config.SPARK_ENV_FILE_DEFAULT,
                                description="Shell environment file carrying the Spark classpath variable.")
    user_jars_dir: str = Field(default=static_config.USER_JARS_DIR_DEFAULT,
                               description="Local classpath directory for user-provided jars.")
    classpath_variable: str = Field(default=static_config.CLASSPATH_VARIABLE_DEFAULT,
                                    description="Name of the classpath variable in the Spark env file.")
    default_interpreter: str = Field(default=static_config.DEFAULT_INTERPRETER,
                                     description="Interpreter used when a manifest record leaves it blank.")
    hadoop_command: str = Field(default="hadoop",
                                description="Hadoop CLI used to fetch non-HTTP locations.")

    support_bucket: str = Field(default=static_config.SUPPORT_BUCKET_DEFAULT,
                                description="Root of the AWS-provided Spark support files.")
    regional_support_buckets: Dict[str, str] = Field(
        default_factory=lambda: dict(static_config.REGIONAL_SUPPORT_BUCKETS),
        description="Per-region replacements for support_bucket.",
    )
    manifest_object: str = Field(default=static_config.MANIFEST_OBJECT,
                                 description="Manifest location relative to the support bucket.")
    ganglia_object: str = Field(default=static_config.GANGLIA_OBJECT,
                                description="Ganglia metrics script relative to the support bucket.")
    max_config_object: str = Field(default=static_config.MAX_CONFIG_OBJECT,
                                   description="Maximize-config script relative to the support bucket.")
    scala_object: str = Field(default=static_config.SCALA_OBJECT,
                              description="Scala binaries relative to the support bucket.")
    ec2_sizing_object: str = Field(default=static_config.EC2_SIZING_OBJECT,
                                   description="EC2 instance sizing JSON relative to the support bucket.")

    log_prefix: str = Field(default=static_config.LOG_PREFIX_DEFAULT,
                            description="Prefix for log messages from the bootstrap action.")

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))


class BootstrapOptions(BaseModel):
    """Flags given to the bootstrap action on the command line."""

    config_location: Optional[str] = None
    requested_version: str = ""
    build_id: str = ""
    install_ganglia: bool = False
    maximize_config: bool = False
    user_jars_path: Optional[str] = None
    assembly_first: bool = False
    driver_log_level: str = "INFO"
    dynamic_allocation: bool = False

    @field_validator("driver_log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        # Passed to the installer as given; unknown names are only warned about.
        return value.strip().upper()
