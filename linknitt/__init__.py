"""LinkNITT - campus marketplace, job board and mentorship service."""

__version__ = "1.0.0"
