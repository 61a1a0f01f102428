#!/usr/bin/env python3
# install_spark.py
# -*- coding: utf-8 -*-
"""
Entry point for the EMR Spark bootstrap action.

Usage as a bootstrap action:
    install_spark.py [-v VERSION] [-c MANIFEST] [-b BUILD] [-g] [-x] [-a] [-u PATH] [-l LEVEL]
"""

import sys

from spark_bootstrap.main_installer import main

if __name__ == "__main__":
    sys.exit(main())
