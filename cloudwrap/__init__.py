"""
Cloudwrap - fetch service configuration from AWS Parameter Store and Secrets Manager.

This package provides a CLI that resolves the parameters and secrets stored
under ``/<environment>/<service>/`` and renders them as tables, env files, or
injects them into a child process environment.
"""

__version__ = "0.3.0"
__author__ = "Cloudwrap"
