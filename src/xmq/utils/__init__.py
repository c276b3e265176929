"""Utility modules for xmq.

Provides:
- logger: get_logger for logging
"""

from xmq.utils.logger import get_logger

__all__ = ["get_logger"]
