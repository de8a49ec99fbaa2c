"""
Hacker News Sort Validator

Checks that a listing page presents items newest to oldest across pagination.
"""

__version__ = "0.1.0"
