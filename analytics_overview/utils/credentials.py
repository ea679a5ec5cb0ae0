"""Google Analytics credentials.

Bootstraps the service account file from environment variables and tells the
updater whether an account is configured at all.

On Render (and similar PaaS), credential JSON files can't be committed
to git. Instead, paste the JSON content into an env var and
`bootstrap_credentials()` writes it to the expected file path at startup:

    GA_CREDENTIALS_JSON   → settings.ga_credentials_path
    GA_CREDENTIALS_PATH   → used when its value looks like JSON; the file then
                            goes to ./credentials/ga-credentials.json
    GOOGLE_SA_JSON        → shared service account fallback
"""
import json
import os
from typing import Optional

from google.oauth2 import service_account

from analytics_overview.config import Settings, get_settings
from analytics_overview.utils.logger import log

ANALYTICS_SCOPES = ["https://www.googleapis.com/auth/analytics.readonly"]
DEFAULT_CREDENTIALS_PATH = "./credentials/ga-credentials.json"

_CREDENTIAL_ENV_VARS = ("GA_CREDENTIALS_JSON", "GA_CREDENTIALS_PATH", "GOOGLE_SA_JSON")


def _is_json(value: str) -> bool:
    """Check if a string looks like JSON content (not a file path)."""
    stripped = value.strip()
    return stripped.startswith("{") and stripped.endswith("}")


def credentials_file_path(settings: Settings) -> str:
    """Configured credential file, or the default one when GA_CREDENTIALS_PATH holds the JSON itself"""
    if _is_json(settings.ga_credentials_path):
        return DEFAULT_CREDENTIALS_PATH
    return settings.ga_credentials_path


def bootstrap_credentials(settings: Optional[Settings] = None) -> bool:
    """Write the credential JSON file from env vars if the file doesn't exist.

    Returns:
        True if a credential file is present afterwards
    """
    settings = settings or get_settings()
    file_path = credentials_file_path(settings)

    if os.path.exists(file_path):
        log.info(f"Credential file {file_path} already exists, skipping")
        return True

    json_str = None
    source_var = None
    for var in _CREDENTIAL_ENV_VARS:
        value = os.environ.get(var, "")
        if value and _is_json(value):
            json_str = value
            source_var = var
            break

    if not json_str:
        return False

    try:
        json.loads(json_str)  # Validate it's real JSON
    except json.JSONDecodeError:
        log.error(f"{source_var} is not valid JSON, skipping")
        return False

    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(file_path, "w") as f:
        f.write(json_str)
    log.info(f"Wrote {file_path} from {source_var}")
    return True


class GoogleClientHelper:
    """Holds the configured Google account and loads its credentials"""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.credentials_path = credentials_file_path(settings)
        self.account_id = settings.ga_account_id
        self.property_id = settings.ga_property_id
        self.profile_id = settings.ga_profile_id

    def token_is_set(self) -> bool:
        """True when a credential file and a profile to query are configured"""
        return bool(self.profile_id) and os.path.exists(self.credentials_path)

    def get_credentials(self):
        """Service account credentials scoped for read-only Analytics access"""
        return service_account.Credentials.from_service_account_file(
            self.credentials_path,
            scopes=ANALYTICS_SCOPES
        )
