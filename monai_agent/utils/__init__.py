"""
Utilities Module
================

Common utilities shared across the SDK:
- logger: leveled, context-aware logging
- config: environment-backed configuration
- polling: retry-with-sleep loop for remote status checks
- helpers: unit formatting and token decimals
"""

from monai_agent.utils.logger import Logger, log
from monai_agent.utils.config import get_config, reset_config, Config
from monai_agent.utils.polling import poll_until

__all__ = ["Logger", "log", "get_config", "reset_config", "Config", "poll_until"]
