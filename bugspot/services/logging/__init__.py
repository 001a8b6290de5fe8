"""
Logging helpers.
"""
from .logger import StructuredFormatter, SubmissionLogger, configure_logging

__all__ = ['StructuredFormatter', 'SubmissionLogger', 'configure_logging']
