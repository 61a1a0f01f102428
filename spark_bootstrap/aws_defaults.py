# spark_bootstrap/aws_defaults.py
# -*- coding: utf-8 -*-
"""
Region-specific locations of the AWS-provided Spark support files.

Most regions read from the generic support bucket; regions listed in
AppSettings.regional_support_buckets have their own copy.
"""

from spark_bootstrap.config_models import AppSettings


def support_bucket_for_region(region: str, app_settings: AppSettings) -> str:
    return app_settings.regional_support_buckets.get(
        region, app_settings.support_bucket
    ).rstrip("/")


def support_location(object_name: str, region: str, app_settings: AppSettings) -> str:
    """Join a support object name onto the bucket serving `region`."""
    return f"{support_bucket_for_region(region, app_settings)}/{object_name.lstrip('/')}"


def default_manifest_location(region: str, app_settings: AppSettings) -> str:
    return support_location(app_settings.manifest_object, region, app_settings)


def default_ganglia_script(region: str, app_settings: AppSettings) -> str:
    return support_location(app_settings.ganglia_object, region, app_settings)


def default_max_config_script(region: str, app_settings: AppSettings) -> str:
    return support_location(app_settings.max_config_object, region, app_settings)


def default_scala_location(region: str, app_settings: AppSettings) -> str:
    return support_location(app_settings.scala_object, region, app_settings)


def default_ec2_sizing_location(region: str, app_settings: AppSettings) -> str:
    return support_location(app_settings.ec2_sizing_object, region, app_settings)
