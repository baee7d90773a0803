"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow"
    )

    # Application
    APP_NAME: str = "s3-checker"
    VERSION: str = "1.0.0"

    # Storage provider
    STORAGE_DOMAIN: str = "s3.amazonaws.com"
    DEFAULT_REGION: str = "us-east-1"
    USER_AGENT: str = "s3-checker/1.0"

    # Timeouts (seconds)
    PROBE_TIMEOUT: float = 6.0
    FEED_TIMEOUT: float = 10.0
    ACL_TIMEOUT: float = 20.0

    # Scan Configuration
    DEFAULT_CONCURRENCY: int = 50

    # Intelligence feeds
    GHW_API_KEY: str = ""
    GHW_API_URL: str = "https://buckets.grayhatwarfare.com/api/v1/buckets"
    OSINT_URL: str = "https://osint.sh/buckets/"

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FILE: str = ""

    def bucket_url(self, bucket: str) -> str:
        """Virtual-hosted endpoint for a bucket name."""
        return f"http://{bucket}.{self.STORAGE_DOMAIN}"


settings = Settings()
