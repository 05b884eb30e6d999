"""json2dcp utilities module.

This module contains shared utilities used across the converter.

Components:
- exceptions: Custom exception classes
- settings: Configuration and settings management
"""

from json2dcp.utils.exceptions import *  # noqa: F401, F403
from json2dcp.utils.settings import *  # noqa: F401, F403
