"""
Configuration module for the RTC agent session layer.

This module provides centralized configuration management for the backend proxy
and the client, including constants, logging setup, and environment-based settings.

Key components:
- constants: Application-wide constants, including vendor action names, the
  signature version, room message commands and agent template defaults.
- logging_config: Console and rotating file logging for the ``rtc_agent`` logger.
- settings: Pydantic settings models built from environment variables.

Usage examples:
```python
from rtc_agent.config.constants import LOGGER_NAME, ACTION_REGISTER_AGENT
from rtc_agent.config.logging_config import configure_logging
from rtc_agent.config.settings import VendorSettings

logger = configure_logging()
settings = VendorSettings.from_env()  # raises ConfigurationError when incomplete
```
"""

# Config module initialization
