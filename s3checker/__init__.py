"""s3-checker: bucket name discovery and exposure audit."""

__version__ = "1.0.0"
