# tests/spark_bootstrap/test_main_installer.py
# -*- coding: utf-8 -*-
"""End-to-end runs of the bootstrap with the remote store and subprocesses mocked."""

import subprocess
from pathlib import Path

import pytest
import yaml
from pytest_mock import MockerFixture

from spark_bootstrap.config_models import BootstrapOptions
from spark_bootstrap.exceptions import FetchError
from spark_bootstrap.main_installer import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    main,
    plan_steps,
    run_bootstrap,
)

CUSTOM_MANIFEST = "s3://my-bucket/spark/config.file"

MANIFEST = "\n".join(
    [
        "# ami\tversion\tinterpreter\tscript\tbinaries\tmaxconfig\tganglia",
        "3\t1.3.1.e\truby\ts3://my-bucket/3/install-spark\ts3://my-bucket/3/spark/",
        "3.8.0\t1.3.1.e\truby\ts3://my-bucket/380/install-spark\ts3://my-bucket/380/spark/",
        "default\t1.3.1.e\tpython\ts3://my-bucket/default/install-spark\ts3://my-bucket/default/spark/",
    ]
)


class RemoteStore:
    """In-memory stand-in for the S3 and HTTP locations the bootstrap reads."""

    def __init__(self, objects):
        self.objects = dict(objects)
        self.fetched = []

    def fetch(self, location, destination_dir, app_settings, current_logger=None):
        self.fetched.append(location)
        if location not in self.objects:
            raise FetchError(location, "No such file or directory")
        local = Path(destination_dir) / location.rstrip("/").rsplit("/", 1)[-1]
        local.write_text(self.objects[location])
        return local


@pytest.fixture
def node(mocker: MockerFixture, app_settings):
    """A cluster node running AMI 3.8.0 in us-west-2 with a custom manifest available."""
    state_file = Path(app_settings.job_flow_state_file)
    state_file.parent.mkdir(parents=True)
    state_file.write_text('amiVersion: "3.8.0"\n')
    Path(app_settings.job_flow_file).write_text('{"hadoopVersion": "2.4.0"}\n')

    store = RemoteStore({CUSTOM_MANIFEST: MANIFEST})
    for script in ("3", "380", "default"):
        store.objects[f"s3://my-bucket/{script}/install-spark"] = "#!/usr/bin/env ruby\n"

    zone = mocker.patch(
        "spark_bootstrap.cluster_facts.get_availability_zone", return_value="us-west-2b"
    )
    fetch = mocker.patch(
        "spark_bootstrap.install_steps.fetch_remote_file", side_effect=store.fetch
    )
    run = mocker.patch("spark_bootstrap.install_steps.run_command")
    return {"store": store, "zone": zone, "fetch": fetch, "run": run}


def _installed_script(node):
    command = node["run"].call_args_list[0].args[0]
    return command


def test_sentinel_present_does_nothing(node, app_settings):
    sentinel = Path(app_settings.sentinel_path)
    sentinel.parent.mkdir(parents=True)
    sentinel.write_text("# done\n")

    assert run_bootstrap(BootstrapOptions(config_location=CUSTOM_MANIFEST), app_settings) == EXIT_SUCCESS
    node["fetch"].assert_not_called()
    node["run"].assert_not_called()
    node["zone"].assert_not_called()


def test_exact_ami_entry_is_installed(node, app_settings):
    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, requested_version="1.3.1.e")

    assert run_bootstrap(options, app_settings) == EXIT_SUCCESS

    interpreter, script = _installed_script(node)
    assert interpreter == "ruby"
    assert node["store"].fetched == [CUSTOM_MANIFEST, "s3://my-bucket/380/install-spark"]
    assert Path(script).name == "install-spark"
    env = node["run"].call_args.kwargs["env"]
    assert env["SparkS3InstallPath"] == "s3://my-bucket/380/spark/"
    assert env["Ec2Region"] == "us-west-2"
    assert Path(app_settings.sentinel_path).is_file()


def test_unknown_ami_uses_default_entry(node, app_settings):
    Path(app_settings.job_flow_state_file).write_text('amiVersion: "9.0.0"\n')

    assert run_bootstrap(BootstrapOptions(config_location=CUSTOM_MANIFEST), app_settings) == EXIT_SUCCESS

    assert _installed_script(node)[0] == "python"
    assert "s3://my-bucket/default/install-spark" in node["store"].fetched


def test_no_matching_entry_fails_before_installing(node, app_settings):
    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, requested_version="9.9.9")

    assert run_bootstrap(options, app_settings) == EXIT_FAILURE

    node["run"].assert_not_called()
    assert not Path(app_settings.sentinel_path).exists()


def test_missing_manifest_fails(node, app_settings):
    options = BootstrapOptions(config_location="s3://my-bucket/absent.file")

    assert run_bootstrap(options, app_settings) == EXIT_FAILURE
    node["run"].assert_not_called()


def test_region_default_manifest(node, app_settings):
    node["zone"].return_value = "eu-central-1a"

    assert run_bootstrap(BootstrapOptions(), app_settings) == EXIT_FAILURE

    assert node["store"].fetched == [
        "s3://eu-central-1.support.elasticmapreduce/spark/config.file"
    ]


def test_installer_failure_is_fatal(node, app_settings):
    node["run"].side_effect = FileNotFoundError(2, "No such file", "ruby")

    assert run_bootstrap(BootstrapOptions(config_location=CUSTOM_MANIFEST), app_settings) == EXIT_FAILURE
    assert not Path(app_settings.sentinel_path).exists()


def test_ganglia_failure_is_not_fatal(node, app_settings):
    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, install_ganglia=True)

    assert run_bootstrap(options, app_settings) == EXIT_SUCCESS

    assert node["store"].fetched[-1] == "s3://support.elasticmapreduce/spark/install-ganglia-metrics"
    assert Path(app_settings.sentinel_path).is_file()


def test_max_config_failure_is_fatal_after_install(node, app_settings):
    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, maximize_config=True)

    assert run_bootstrap(options, app_settings) == EXIT_FAILURE

    assert node["store"].fetched[-1] == (
        "s3://support.elasticmapreduce/spark/maximize-spark-default-config"
    )
    assert Path(app_settings.sentinel_path).is_file()


def test_max_config_runs_after_installer(node, app_settings):
    script = "s3://support.elasticmapreduce/spark/maximize-spark-default-config"
    node["store"].objects[script] = "#!/bin/bash\n"
    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, maximize_config=True)

    assert run_bootstrap(options, app_settings) == EXIT_SUCCESS

    commands = [c.args[0] for c in node["run"].call_args_list]
    assert len(commands) == 2
    assert commands[1][0].endswith("maximize-spark-default-config")


def test_ganglia_script_failure_is_not_fatal(node, app_settings):
    script = "s3://support.elasticmapreduce/spark/install-ganglia-metrics"
    node["store"].objects[script] = "#!/bin/bash\nexit 4\n"
    node["run"].side_effect = [None, subprocess.CalledProcessError(4, [script])]
    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, install_ganglia=True)

    assert run_bootstrap(options, app_settings) == EXIT_SUCCESS

    assert node["run"].call_count == 2
    assert Path(app_settings.sentinel_path).is_file()


def test_max_config_script_failure_is_fatal(node, app_settings):
    script = "s3://support.elasticmapreduce/spark/maximize-spark-default-config"
    node["store"].objects[script] = "#!/bin/bash\nexit 1\n"
    node["run"].side_effect = [None, subprocess.CalledProcessError(1, [script])]
    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, maximize_config=True)

    assert run_bootstrap(options, app_settings) == EXIT_FAILURE

    assert node["run"].call_count == 2
    assert Path(app_settings.sentinel_path).is_file()


def test_assembly_first_rewrites_non_utf8_env_file(node, app_settings):
    lib_dir = Path(app_settings.spark_lib_dir)
    lib_dir.mkdir(parents=True)
    (lib_dir / "spark-assembly-1.3.1.jar").write_text("jar")
    env_file = Path(app_settings.spark_env_file)
    env_file.parent.mkdir(parents=True)
    env_file.write_bytes(b'# caf\xe9\nexport SPARK_CLASSPATH="/a"\n')
    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, assembly_first=True)

    assert run_bootstrap(options, app_settings) == EXIT_SUCCESS

    assert env_file.read_bytes() == (
        b'# caf\xe9\nexport SPARK_CLASSPATH="' + str(lib_dir / "spark-assembly-1.3.1.jar").encode() + b':/a"\n'
    )


def test_assembly_and_user_jars_go_first_on_classpath(mocker: MockerFixture, node, app_settings):
    lib_dir = Path(app_settings.spark_lib_dir)
    lib_dir.mkdir(parents=True)
    (lib_dir / "spark-assembly-1.3.1-hadoop2.4.0.jar").write_text("jar")
    env_file = Path(app_settings.spark_env_file)
    env_file.parent.mkdir(parents=True)
    env_file.write_text('export SPARK_CLASSPATH="/home/hadoop/spark/conf"\n')

    def fake_copy(location, destination_dir, app_settings, current_logger=None):
        Path(destination_dir).mkdir(parents=True, exist_ok=True)
        (Path(destination_dir) / "my-udfs.jar").write_text("jar")

    copy = mocker.patch(
        "spark_bootstrap.install_steps.fetch_remote_directory", side_effect=fake_copy
    )
    options = BootstrapOptions(
        config_location=CUSTOM_MANIFEST, assembly_first=True, user_jars_path="s3://my-bucket/jars/"
    )

    assert run_bootstrap(options, app_settings) == EXIT_SUCCESS

    copy.assert_called_once()
    assert copy.call_args.args[0] == "s3://my-bucket/jars/"
    assert env_file.read_text() == (
        f'export SPARK_CLASSPATH="{app_settings.user_jars_dir}/*:'
        f'{lib_dir}/spark-assembly-1.3.1-hadoop2.4.0.jar:/home/hadoop/spark/conf"\n'
    )
    assert Path(f"{env_file}.prev").is_file()


def test_assembly_first_without_env_file_is_not_fatal(node, app_settings):
    lib_dir = Path(app_settings.spark_lib_dir)
    lib_dir.mkdir(parents=True)
    (lib_dir / "spark-assembly-1.3.1.jar").write_text("jar")

    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, assembly_first=True)

    assert run_bootstrap(options, app_settings) == EXIT_SUCCESS


def test_user_jar_copy_failure_is_fatal(mocker: MockerFixture, node, app_settings):
    mocker.patch(
        "spark_bootstrap.install_steps.fetch_remote_directory",
        side_effect=FetchError("s3://my-bucket/jars/", "hadoop fs -get exited with status 1"),
    )
    options = BootstrapOptions(config_location=CUSTOM_MANIFEST, user_jars_path="s3://my-bucket/jars/")

    assert run_bootstrap(options, app_settings) == EXIT_FAILURE


def test_plan_steps_order():
    options = BootstrapOptions(
        install_ganglia=True, maximize_config=True, assembly_first=True, user_jars_path="s3://b/jars"
    )

    assert [tag for tag, _, _, _ in plan_steps(options)] == [
        "FETCH_MANIFEST", "SELECT_RECORD", "RUN_INSTALLER",
        "GANGLIA", "MAXIMIZE_CONFIG", "ASSEMBLY_FIRST", "USER_JARS",
    ]
    assert [tag for tag, _, _, _ in plan_steps(BootstrapOptions())] == [
        "FETCH_MANIFEST", "SELECT_RECORD", "RUN_INSTALLER",
    ]


def _settings_file(tmp_path, app_settings):
    settings_file = tmp_path / "bootstrap.yaml"
    settings_file.write_text(yaml.safe_dump(app_settings.model_dump()))
    return str(settings_file)


def test_main_runs_bootstrap(mocker: MockerFixture, node, app_settings, tmp_path):
    mocker.patch("spark_bootstrap.main_installer.setup_logging")

    exit_code = main(
        ["-c", CUSTOM_MANIFEST, "-v", "1.3.1.e", "-l", "warn",
         "--settings-file", _settings_file(tmp_path, app_settings)]
    )

    assert exit_code == EXIT_SUCCESS
    assert node["run"].call_args.kwargs["env"]["SparkDriverLogLevel"] == "WARN"
    assert Path(app_settings.sentinel_path).is_file()


def test_main_view_config(mocker: MockerFixture, node, app_settings, tmp_path):
    mocker.patch("spark_bootstrap.main_installer.setup_logging")
    mocker.patch(
        "spark_bootstrap.main_installer.get_availability_zone", return_value="eu-central-1a"
    )
    view = mocker.patch("spark_bootstrap.main_installer.view_configuration")

    exit_code = main(["--view-config", "--settings-file", _settings_file(tmp_path, app_settings)])

    assert exit_code == EXIT_SUCCESS
    assert view.call_args.args[2] == "eu-central-1"
    node["fetch"].assert_not_called()
