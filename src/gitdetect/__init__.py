"""gitdetect — find secrets in source repositories with compound regex + entropy rules."""

__version__ = "1.0.0"
