"""Settings for mailchimp-connect.

Every provider constant comes from the environment. A local .env file is
loaded when present.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_REDIRECT_URI = "http://127.0.0.1:3000/mailchimp/auth/callback"
DEFAULT_AUTHORIZE_URL = "https://login.mailchimp.com/oauth2/authorize"
DEFAULT_TOKEN_URL = "https://login.mailchimp.com/oauth2/token"
DEFAULT_METADATA_URL = "https://login.mailchimp.com/oauth2/metadata"
DEFAULT_STATIC_DIR = Path(__file__).parent / "views"

# Environment variable -> settings key
ENV_KEYS = {
    "MAILCHIMP_CLIENT_ID": "client_id",
    "MAILCHIMP_CLIENT_SECRET": "client_secret",
    "MAILCHIMP_REDIRECT_URI": "redirect_uri",
    "MAILCHIMP_API_KEY": "api_key",
    "MAILCHIMP_INSTANCE": "instance",
    "MAILCHIMP_LIST_ID": "list_id",
    "MAILCHIMP_API_VERSION": "api_version",
    "MAILCHIMP_AUTHORIZE_URL": "authorize_url",
    "MAILCHIMP_TOKEN_URL": "token_url",
    "MAILCHIMP_METADATA_URL": "metadata_url",
    "HOST": "host",
    "PORT": "port",
    "STATIC_DIR": "static_dir",
    "HTTP_TIMEOUT": "http_timeout",
    "SUPABASE_URL": "supabase_url",
    "SUPABASE_ANON_KEY": "supabase_anon_key",
    "SERVICE_NAME": "service_name",
}


class Settings:
    """Configuration container."""

    def __init__(self, data: dict = None):
        self.data = data or {}

    @property
    def client_id(self) -> str:
        return self.data.get("client_id") or ""

    @property
    def client_secret(self) -> str:
        return self.data.get("client_secret") or ""

    @property
    def redirect_uri(self) -> str:
        return self.data.get("redirect_uri") or DEFAULT_REDIRECT_URI

    @property
    def api_key(self) -> str:
        return self.data.get("api_key") or ""

    @property
    def instance(self) -> Optional[str]:
        """Data-center prefix, e.g. "us14".

        Falls back to the suffix of the API key, which Mailchimp issues as
        "<key>-<dc>".
        """
        if self.data.get("instance"):
            return self.data["instance"]
        if "-" in self.api_key:
            return self.api_key.rsplit("-", 1)[1]
        return None

    @property
    def list_id(self) -> str:
        return self.data.get("list_id") or ""

    @property
    def api_version(self) -> str:
        return self.data.get("api_version") or "3.0"

    @property
    def authorize_url(self) -> str:
        return self.data.get("authorize_url") or DEFAULT_AUTHORIZE_URL

    @property
    def token_url(self) -> str:
        return self.data.get("token_url") or DEFAULT_TOKEN_URL

    @property
    def metadata_url(self) -> str:
        return self.data.get("metadata_url") or DEFAULT_METADATA_URL

    @property
    def host(self) -> str:
        return self.data.get("host") or "127.0.0.1"

    @property
    def port(self) -> int:
        return int(self.data.get("port") or 3000)

    @property
    def static_dir(self) -> Path:
        return Path(self.data.get("static_dir") or DEFAULT_STATIC_DIR)

    @property
    def http_timeout(self) -> float:
        return float(self.data.get("http_timeout") or 10.0)

    @property
    def supabase_url(self) -> Optional[str]:
        return self.data.get("supabase_url")

    @property
    def supabase_anon_key(self) -> Optional[str]:
        return self.data.get("supabase_anon_key")

    @property
    def service_name(self) -> str:
        return self.data.get("service_name") or "mailchimp-connect"

    @property
    def members_url(self) -> str:
        """Add-member endpoint of the configured signup list."""
        return (
            f"https://{self.instance}.api.mailchimp.com/{self.api_version}"
            f"/lists/{self.list_id}/members/"
        )

    def oauth_configured(self) -> bool:
        """Check if the OAuth client credentials are present."""
        return bool(self.client_id and self.client_secret)

    def signup_configured(self) -> bool:
        """Check if the signup list can be reached."""
        return bool(self.api_key and self.instance and self.list_id)


def load_settings(env_file: Path = None) -> Settings:
    """Load settings from the environment (after reading .env if present)."""
    env_file = env_file or Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    data = {}
    for env_name, key in ENV_KEYS.items():
        value = os.getenv(env_name)
        if value:
            data[key] = value
    return Settings(data)
