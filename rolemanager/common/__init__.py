"""Common utilities shared across Role Manager components."""

from rolemanager.common.logger import setup_logger

__all__ = ["setup_logger"]
