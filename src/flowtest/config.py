"""
Settings shared across the flowtest package.
"""

import logging
import os
from typing import Optional, Union

# --- Configuration ---
EVENT_ID_PARAMETER = "_eventId"
FLOW_EXECUTION_URL_TEMPLATE = "/{flow_id}?execution={flow_execution_key}"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL_ENV = "FLOWTEST_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def get_log_level() -> str:
    """Log level requested through the environment, upper-cased."""
    return os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
    """
    Send flowtest log records to stderr.

    The package itself never installs handlers; call this from a conftest
    when the redirect and completion trail is wanted in the test output.
    """
    if level is None:
        level = get_log_level()
    logging.basicConfig(format=LOG_FORMAT, level=logging.WARNING)
    logging.getLogger("flowtest").setLevel(level)
