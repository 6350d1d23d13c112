"""
Shared utilities for logging and error handling.
"""
