"""
Exit codes for speedread-cli.

Semantic exit codes so scripts can tell failures apart.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Input file missing or unreadable
ERROR_NOT_FOUND = 5
