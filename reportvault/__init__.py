"""reportvault — password-protected report containers and a secure in-memory viewer."""

__version__ = "1.0.0"
