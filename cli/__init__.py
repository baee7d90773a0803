"""s3-checker command line."""
