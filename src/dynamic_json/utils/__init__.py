"""Utility functions for Dynamic JSON."""

from .size_calculator import SizeCalculator
from .key_sanitization import KeySanitizer
from .validation import ValidationUtils

__all__ = ["SizeCalculator", "KeySanitizer", "ValidationUtils"]
