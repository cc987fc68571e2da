"""Keep Gerrit commit messages in sync with their review approvals."""

__version__ = "0.1.0"
