"""confstack - layered file and database configuration."""

__version__ = "0.1.0"
