"""Core configuration and logging for linknitt."""
