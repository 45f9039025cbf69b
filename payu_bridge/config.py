"""
config.py — Runtime Configuration

All credentials and URLs come from environment variables (or a local `.env`
file) and are loaded once per process into an immutable `Settings` object.
Handlers receive it through FastAPI dependency injection instead of reading
module-level globals.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Typed, frozen view of the bridge configuration.

    Attributes:
        payu_client_id (str): OAuth client id issued by PayU.
        payu_client_secret (str): OAuth client secret issued by PayU.
        payu_pos_id (str): Merchant point-of-sale id sent with every order.
        payu_second_key (str): PayU "second key" (MD5). Loaded but not used.
        payu_api_url (str): PayU base URL (sandbox by default).
        ecwid_store_id (str): Ecwid store id.
        ecwid_api_token (str): Ecwid secret API token.
        ecwid_api_url (str): Ecwid REST API base URL.
        default_currency (str): Currency used when the order carries none.
        public_base_url (Optional[str]): Externally reachable origin of this
            service. Overrides the origin derived from the inbound request.
        http_timeout_seconds (float): Timeout applied to every outbound call.
        port (int): Listening port.
        log_level (str): Root log level.
        log_file (Optional[str]): Optional log file path.
    """
    payu_client_id: str = Field(..., min_length=1)
    payu_client_secret: str = Field(..., min_length=1)
    payu_pos_id: str = Field(..., min_length=1)
    payu_second_key: str = ""
    payu_api_url: str = "https://secure.snd.payu.com"

    ecwid_store_id: str = Field(..., min_length=1)
    ecwid_api_token: str = Field(..., min_length=1)
    ecwid_api_url: str = "https://app.ecwid.com/api/v3"

    default_currency: str = "PLN"
    public_base_url: Optional[str] = None
    http_timeout_seconds: float = Field(10.0, gt=0)

    port: int = 3000
    log_level: str = "INFO"
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)


@lru_cache
def get_settings() -> Settings:
    """Returns the process-wide settings, built on first use."""
    return Settings()
