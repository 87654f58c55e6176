"""acmoj - CLI client for ACM Online Judge."""

__version__ = "1.0.0"
