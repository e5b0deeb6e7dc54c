"""
Utility modules for the lead capture functions.
Provides logging setup and the upstream retry policy.
"""

from .json_utils import loads_strict
from .logging import ensure_logging, logged_as, setup_logging
from .retry import build_retrying, call_with_retry

__all__ = ["loads_strict", "setup_logging", "ensure_logging", "logged_as", "build_retrying", "call_with_retry"]
