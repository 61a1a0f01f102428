# spark_bootstrap/__init__.py
# -*- coding: utf-8 -*-
"""
EMR bootstrap action that installs Apache Spark on a cluster node.
"""

from spark_bootstrap.config import SCRIPT_VERSION

__version__ = SCRIPT_VERSION
