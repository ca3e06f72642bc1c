"""Shared utilities for the directory checks."""

from orgchart.utils.io import load_config_file
from orgchart.utils.types import ConfigDict, ReportFormat, RunStatus, exit_code_for
