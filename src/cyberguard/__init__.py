"""CyberGuard: security-awareness training portal API for SMEs."""

__version__ = "0.1.0"
