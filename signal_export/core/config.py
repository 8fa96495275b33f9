"""Configuration management for signal exports."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from signal_export.core.constants import (
    COLLECTIVE2_URL,
    CRUNCHDAO_URL,
    DEFAULT_NUMERAI_FILENAME,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    NUMERAI_URL,
)

if TYPE_CHECKING:
    from signal_export.core.transport import HttpTransport
    from signal_export.exports.base import BaseSignalExport


class SignalExportConfig(BaseSettings):
    """Destination credentials and transport settings.

    Uses Pydantic v2 settings with environment variable support. A destination
    is only built when its credentials are present.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIGNAL_EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Transport settings
    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SECONDS, description="HTTP timeout in seconds"
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    log_dir: Path = Field(default=Path("logs"), description="Directory for logs")

    # Endpoints
    collective2_url: str = Field(default=COLLECTIVE2_URL, description="Collective2 positions API")
    crunchdao_url: str = Field(default=CRUNCHDAO_URL, description="CrunchDAO tournament API")
    numerai_url: str = Field(default=NUMERAI_URL, description="Numerai GraphQL API")

    # Collective2
    collective2_api_key: str | None = Field(default=None, description="Collective2 API key")
    collective2_system_id: int | None = Field(default=None, description="Collective2 system id")
    collective2_platform_id: str | None = Field(
        default=None, description="Optional Collective2 platform id"
    )

    # CrunchDAO
    crunchdao_api_key: str | None = Field(default=None, description="CrunchDAO API key")
    crunchdao_model: str | None = Field(default=None, description="CrunchDAO model name")
    crunchdao_submission_name: str = Field(default="", description="Submission label")
    crunchdao_comment: str = Field(default="", description="Submission comment")

    # Numerai
    numerai_public_id: str | None = Field(default=None, description="Numerai public key id")
    numerai_secret_id: str | None = Field(default=None, description="Numerai secret key")
    numerai_model_id: str | None = Field(default=None, description="Numerai model id")
    numerai_filename: str = Field(
        default=DEFAULT_NUMERAI_FILENAME, description="Uploaded predictions file name"
    )

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, value: float) -> float:
        """Ensure the HTTP timeout is positive."""
        if value <= 0:
            raise ValueError("request_timeout must be positive")
        return value

    def create_transport(self) -> HttpTransport:
        """Create the HTTP transport shared settings describe."""
        from signal_export.core.transport import HttpTransport

        return HttpTransport(timeout=self.request_timeout, verify_ssl=self.verify_ssl)

    def create_signal_exports(self) -> list[BaseSignalExport]:
        """Build one export per destination whose credentials are configured.

        Returns:
            Exports in Collective2, CrunchDAO, Numerai order.
        """
        from signal_export.exports import (
            Collective2SignalExport,
            CrunchDAOSignalExport,
            NumeraiSignalExport,
        )

        exports: list[BaseSignalExport] = []
        if self.collective2_api_key is not None and self.collective2_system_id is not None:
            exports.append(
                Collective2SignalExport(
                    self.collective2_api_key,
                    self.collective2_system_id,
                    self.collective2_platform_id,
                    url=self.collective2_url,
                    transport=self.create_transport(),
                )
            )
        if self.crunchdao_api_key is not None and self.crunchdao_model is not None:
            exports.append(
                CrunchDAOSignalExport(
                    self.crunchdao_api_key,
                    self.crunchdao_model,
                    self.crunchdao_submission_name,
                    self.crunchdao_comment,
                    url=self.crunchdao_url,
                    transport=self.create_transport(),
                )
            )
        if (
            self.numerai_public_id is not None
            and self.numerai_secret_id is not None
            and self.numerai_model_id is not None
        ):
            exports.append(
                NumeraiSignalExport(
                    self.numerai_public_id,
                    self.numerai_secret_id,
                    self.numerai_model_id,
                    self.numerai_filename,
                    url=self.numerai_url,
                    transport=self.create_transport(),
                )
            )
        return exports


def load_config() -> SignalExportConfig:
    """Load configuration from environment and .env file."""
    return SignalExportConfig()
