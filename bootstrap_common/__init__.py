# bootstrap_common/__init__.py
# -*- coding: utf-8 -*-
"""
Shared helpers for the EMR bootstrap action: command execution, logging,
file handling and remote fetches.
"""
