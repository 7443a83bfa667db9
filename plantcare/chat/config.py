"""Client configuration with environment variable loading.

Pydantic-based settings for the chat client: where the assistant API lives
and the attachment limits enforced before anything is sent.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

MAX_ATTACHMENTS = 5
MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024  # 10MB


class ClientConfig(BaseModel):
    """Configuration for the plant care chat client.

    Attributes:
        api_base_url: Base URL of the assistant API.
        request_timeout: Seconds before an outstanding request is abandoned.
        max_attachments: Maximum images held for one message.
        max_attachment_bytes: Maximum size of a single image.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Assistant API base URL",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "120")),
        gt=0.0,
        description="HTTP timeout in seconds for a chat request",
    )
    max_attachments: int = Field(
        default_factory=lambda: int(os.getenv("MAX_ATTACHMENTS", str(MAX_ATTACHMENTS))),
        ge=0,
        le=MAX_ATTACHMENTS,
        description="Maximum number of images per message",
    )
    max_attachment_bytes: int = Field(
        default_factory=lambda: int(
            os.getenv("MAX_ATTACHMENT_BYTES", str(MAX_ATTACHMENT_BYTES))
        ),
        ge=1,
        le=MAX_ATTACHMENT_BYTES,
        description="Maximum size of one image in bytes",
    )

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so endpoint paths can be appended."""
        return v.strip().rstrip("/")


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.
    """
    return ClientConfig()
