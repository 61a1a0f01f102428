# spark_bootstrap/config.py
"""
Centralized constants and default values for the Spark bootstrap action.

Values here are defaults only; AppSettings lets the environment, a YAML
settings file or the command line override them.
"""

from typing import Dict

SCRIPT_VERSION: str = "1.4.0"

LOG_PREFIX_DEFAULT: str = "[SPARK-BOOTSTRAP]"

# --- Cluster state inputs ---
JOB_FLOW_FILE_DEFAULT: str = "/mnt/var/lib/info/job-flow.json"
JOB_FLOW_STATE_FILE_DEFAULT: str = "/mnt/var/lib/info/job-flow-state.txt"
AVAILABILITY_ZONE_URL_DEFAULT: str = (
    "http://169.254.169.254/latest/meta-data/placement/availability-zone"
)

# AMIs that predate the amiVersion field, keyed by their Hadoop version.
HADOOP_TO_AMI_VERSIONS: Dict[str, str] = {
    "2.2.0": "3.0.4",
    "2.4.0": "3.1.0",
}

# --- Local layout ---
SENTINEL_PATH_DEFAULT: str = "/home/hadoop/.spark-bootstrap-installed"
WORK_DIR_PARENT_DEFAULT: str = "/tmp"
SPARK_HOME_DEFAULT: str = "/home/hadoop/spark"
SPARK_LIB_DIR_DEFAULT: str = f"{SPARK_HOME_DEFAULT}/lib"
SPARK_ENV_FILE_DEFAULT: str = f"{SPARK_HOME_DEFAULT}/conf/spark-env.sh"
USER_JARS_DIR_DEFAULT: str = f"{SPARK_HOME_DEFAULT}/classpath/user-provided"
ASSEMBLY_JAR_GLOB_DEFAULT: str = "spark-assembly*.jar"
CLASSPATH_VARIABLE_DEFAULT: str = "SPARK_CLASSPATH"
DEFAULT_INTERPRETER: str = "/bin/bash"

# --- AWS-provided support files ---
SUPPORT_BUCKET_DEFAULT: str = "s3://support.elasticmapreduce"
REGIONAL_SUPPORT_BUCKETS: Dict[str, str] = {
    "eu-central-1": "s3://eu-central-1.support.elasticmapreduce",
}
MANIFEST_OBJECT: str = "spark/config.file"
GANGLIA_OBJECT: str = "spark/install-ganglia-metrics"
MAX_CONFIG_OBJECT: str = "spark/maximize-spark-default-config"
SCALA_OBJECT: str = "spark/scala/scala-2.10.3.tgz"
EC2_SIZING_OBJECT: str = "spark/ec2-spark.json"

# --- Environment handed to the installer ---
ENV_BINARIES_LOCATION: str = "SparkS3InstallPath"
ENV_BUILD_ID: str = "SparkBuild"
ENV_REGION: str = "Ec2Region"
ENV_SCALA_LOCATION: str = "ScalaS3Location"
ENV_DRIVER_LOG_LEVEL: str = "SparkDriverLogLevel"
ENV_DYNAMIC_ALLOCATION: str = "SparkDynamicAllocation"
ENV_EC2_SIZING_LOCATION: str = "SparkEC2Location"
