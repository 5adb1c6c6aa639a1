"""
Configuration settings for the application.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from acceptance_agent.exceptions import ConfigurationError

# Load environment variables from .env file
_ = load_dotenv()

REQUIRED_VISA_ENV_VARS = (
    "VISA_ACCEPTANCE_MERCHANT_ID",
    "VISA_ACCEPTANCE_API_KEY_ID",
    "VISA_ACCEPTANCE_SECRET_KEY",
)

SANDBOX = "SANDBOX"
PRODUCTION = "PRODUCTION"

DEFAULT_TOOLKIT_FACTORY = "visa_acceptance_agent_toolkit:VisaAcceptanceAgentToolkit"


@dataclass(frozen=True)
class VisaCredentials:
    """Credential set handed to the toolkit constructor."""

    merchant_id: str
    api_key_id: str
    secret_key: str
    environment: str = SANDBOX


class Settings:
    """Application settings loaded from environment variables.

    Values are read on access rather than cached at import so that the
    credential gate always reflects the live process environment.
    """

    @property
    def openai_api_key(self) -> Optional[str]:
        return os.getenv("OPENAI_API_KEY") or None

    @property
    def openai_model(self) -> str:
        return self._get_env("OPENAI_MODEL", "gpt-4o-mini")

    @property
    def openai_api_base(self) -> str:
        return self._get_env("OPENAI_API_BASE", "https://api.openai.com/v1")

    @property
    def agent_tool_max_steps(self) -> int:
        raw = self._get_env("AGENT_TOOL_MAX_STEPS", "8")
        try:
            return max(1, int(raw))
        except ValueError:
            return 8

    @property
    def visa_environment(self) -> str:
        """Toolkit environment tag; anything but PRODUCTION means sandbox."""
        value = self._get_env("VISA_ACCEPTANCE_ENVIRONMENT", SANDBOX).strip().upper()
        return PRODUCTION if value == PRODUCTION else SANDBOX

    @property
    def toolkit_factory(self) -> str:
        return self._get_env("VISA_ACCEPTANCE_TOOLKIT", DEFAULT_TOOLKIT_FACTORY)

    def has_visa_credentials(self) -> bool:
        """Return True iff every required Visa Acceptance variable is set and non-empty."""
        return all(os.getenv(key) for key in REQUIRED_VISA_ENV_VARS)

    def visa_credentials(self) -> VisaCredentials:
        """
        Build the credential set from the environment.

        Raises:
            ConfigurationError: If any required variable is missing
        """
        return VisaCredentials(
            merchant_id=self._get_required_env("VISA_ACCEPTANCE_MERCHANT_ID"),
            api_key_id=self._get_required_env("VISA_ACCEPTANCE_API_KEY_ID"),
            secret_key=self._get_required_env("VISA_ACCEPTANCE_SECRET_KEY"),
            environment=self.visa_environment,
        )

    def require_openai_api_key(self) -> str:
        return self._get_required_env("OPENAI_API_KEY")

    def _get_required_env(self, key: str) -> str:
        """Get a required environment variable, raise error if missing."""
        value = os.getenv(key)
        if not value:
            raise ConfigurationError(f"Required environment variable {key} is not set")
        return value

    def _get_env(self, key: str, default: str) -> str:
        """Get an environment variable with a default value."""
        return os.getenv(key, default)


# Global settings instance
settings = Settings()


def has_credentials() -> bool:
    """Credential gate consulted before any remote toolkit call."""
    return settings.has_visa_credentials()
