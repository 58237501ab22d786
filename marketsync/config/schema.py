# Marketsync Configuration Schema
# Pydantic models for YAML configuration validation

from pydantic import BaseModel, Field, field_validator


class RemoteConfig(BaseModel):
    """Marketplace service endpoints."""

    base_url: str = Field(
        default="https://marketplace.secondlife.com/api/1/",
        description="Base URL of the listings API",
    )
    import_url: str = Field(
        default="https://marketplace.secondlife.com/api/1/viewer/",
        description="Base URL of the bulk inventory import API",
    )

    @field_validator("base_url", "import_url")
    @classmethod
    def normalize_url(cls, v: str) -> str:
        """Require http(s) and a single trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/") + "/"


class ImporterConfig(BaseModel):
    """Bulk import job settings."""

    auto_trigger_import: bool = Field(
        default=False, description="Start an import as soon as the merchant status is confirmed"
    )
    poll_interval: float = Field(default=1.0, gt=0, description="Seconds between import job status polls")


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")


class MarketsyncConfig(BaseModel):
    """Root configuration model for marketsync."""

    remote: RemoteConfig = Field(default_factory=RemoteConfig, description="Service endpoints")
    importer: ImporterConfig = Field(default_factory=ImporterConfig, description="Import job settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")
