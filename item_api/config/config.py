import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ConfigurationError

# Load environment variables from .env file if it exists
load_dotenv()


def _optional_env(name: str) -> Optional[str]:
    """Read an environment variable, treating blank values as unset."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


class ItemApiConfig(BaseModel):
    """Configuration for the item read API and its DynamoDB connection."""

    # Table configuration
    table_name: str = Field(
        default_factory=lambda: os.getenv("ITEMS_TABLE_NAME", ""),
        description="DynamoDB table holding the items"
    )

    key_attribute: str = Field(
        default_factory=lambda: os.getenv("ITEMS_KEY_ATTRIBUTE", "ItemId"),
        description="Attribute used as the item lookup key (sort key when composite)"
    )

    partition_key_attribute: str = Field(
        default_factory=lambda: os.getenv("ITEMS_PARTITION_KEY_ATTRIBUTE", "StoreId"),
        description="Partition key attribute of a composite-key table"
    )

    partition_key: Optional[str] = Field(
        default_factory=lambda: _optional_env("ITEMS_PARTITION_KEY"),
        description="Partition key value; when set, lookups use BatchGetItem instead of Scan"
    )

    # AWS settings
    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-west-2"),
        description="AWS region name"
    )

    endpoint_url: Optional[str] = Field(
        default_factory=lambda: _optional_env("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (for local development)"
    )

    # Request settings
    request_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("ITEMS_REQUEST_TIMEOUT_SECONDS", "5.0")),
        description="Deadline applied to every store call made on behalf of a request"
    )

    retries: int = Field(
        default=0,
        description="botocore retry attempts; failures surface immediately by default"
    )

    max_pool_connections: int = Field(
        default=50,
        description="Maximum number of connections in the connection pool"
    )

    # Server settings
    host: str = Field(
        default_factory=lambda: os.getenv("ITEMS_API_HOST", "0.0.0.0"),
        description="Interface the HTTP server binds to"
    )

    port: int = Field(
        default_factory=lambda: int(os.getenv("ITEMS_API_PORT", "8080")),
        description="Port the HTTP server listens on"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("ITEMS_DEBUG_LOGGING", "false").lower() == "true",
        description="Enable debug logging for API and DynamoDB operations"
    )

    @field_validator('table_name')
    @classmethod
    def validate_table_name(cls, v):
        """Validate that a table name was provided."""
        if not v or not v.strip():
            raise ValueError("Table name is required (set ITEMS_TABLE_NAME)")
        return v.strip()

    @field_validator('key_attribute', 'partition_key_attribute')
    @classmethod
    def validate_attribute_name(cls, v):
        """Validate key attribute names."""
        if not v or not v.strip():
            raise ValueError("Key attribute names must not be empty")
        return v.strip()

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('request_timeout_seconds')
    @classmethod
    def validate_timeout(cls, v):
        """Validate the request deadline."""
        if v <= 0:
            raise ValueError("Request timeout must be positive")
        return v

    @field_validator('retries')
    @classmethod
    def validate_retries(cls, v):
        if v < 0:
            raise ValueError("Retries must not be negative")
        return v

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        """Validate the listening port."""
        if not 0 < v < 65536:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def uses_partition_key(self) -> bool:
        """Whether lookups are scoped to a partition key."""
        return self.partition_key is not None

    @classmethod
    def from_env(cls) -> 'ItemApiConfig':
        """Create configuration from environment variables.

        Returns:
            ItemApiConfig instance

        Raises:
            ConfigurationError: If a required setting is missing or invalid
        """
        try:
            return cls()
        except (PydanticValidationError, ValueError) as e:
            raise ConfigurationError(f"Invalid item API configuration: {e}", original_error=e) from e

    @classmethod
    def for_local_development(cls, table_name: str = "PDC-Inventory", **kwargs) -> 'ItemApiConfig':
        """Create configuration for local DynamoDB development.

        Args:
            table_name: Table to read from
            **kwargs: Additional configuration parameters

        Returns:
            ItemApiConfig instance configured for local development
        """
        settings = {
            'table_name': table_name,
            'aws_access_key_id': "local",
            'aws_secret_access_key': "local",
            'region_name': "us-west-2",
            'endpoint_url': "http://localhost:8000",
            'enable_debug_logging': True,
        }
        settings.update(kwargs)
        return cls(**settings)

    model_config = ConfigDict(
        validate_assignment=True
    )
