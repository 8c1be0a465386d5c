"""
HackeyeBot - Utilities
======================
"""

from hackeye.utils.async_utils import create_safe_task, safe_async_operation
from hackeye.utils.error_handler import ErrorHandler

__all__ = ["create_safe_task", "safe_async_operation", "ErrorHandler"]
