import json
import logging
import os
from pathlib import Path

# Allow Google to return broader scopes than requested (e.g. from prior grants)
os.environ["OAUTHLIB_RELAX_TOKEN_SCOPE"] = "1"

from fastapi import APIRouter
from fastapi.responses import RedirectResponse
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow, InstalledAppFlow

from gtasks_mcp.config import get_settings
from gtasks_mcp.models.common import StatusResponse

logger = logging.getLogger(__name__)

INTEGRATION = "tasks"
SCOPES = ["https://www.googleapis.com/auth/tasks"]


def _token_key(account: str) -> str:
    """Build token store key: 'tasks' for default, 'tasks:name' otherwise."""
    return INTEGRATION if account == "default" else f"{INTEGRATION}:{account}"


def _redirect_uri() -> str:
    settings = get_settings()
    return f"http://localhost:{settings.port}/auth/{INTEGRATION}/callback"


class TokenStore:
    """Reads/writes OAuth tokens to a local JSON file, keyed by tasks:account."""

    def __init__(self, path: Path):
        self.path = path

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text())

    def get(self, key: str) -> dict | None:
        return self._read_all().get(key)

    def save(self, key: str, token_data: dict) -> None:
        all_tokens = self._read_all()
        all_tokens[key] = token_data
        self.path.write_text(json.dumps(all_tokens, indent=2))

    def has_valid_token(self, key: str) -> bool:
        token_data = self.get(key)
        if not token_data:
            return False
        creds = Credentials.from_authorized_user_info(token_data)
        return bool(creds.valid or (creds.expired and creds.refresh_token))

    def list_accounts(self) -> list[str]:
        """Return all authenticated account names."""
        accounts = []
        for key in self._read_all():
            if key == INTEGRATION:
                accounts.append("default")
            elif key.startswith(f"{INTEGRATION}:"):
                accounts.append(key.removeprefix(f"{INTEGRATION}:"))
        return accounts


def _get_token_store() -> TokenStore:
    return TokenStore(get_settings().token_file)


def _require_client_secret() -> Path:
    settings = get_settings()
    if not settings.client_secret_file.exists():
        raise FileNotFoundError(
            f"OAuth client secret file not found at {settings.client_secret_file}. "
            "Download it from Google Cloud Console."
        )
    return settings.client_secret_file


def _create_flow() -> Flow:
    return Flow.from_client_secrets_file(
        str(_require_client_secret()),
        scopes=SCOPES,
        redirect_uri=_redirect_uri(),
    )


def get_tasks_credentials(account: str = "default") -> Credentials:
    """Load credentials from token store. Refreshes if expired, raises if missing."""
    store = _get_token_store()
    key = _token_key(account)
    token_data = store.get(key)

    if token_data:
        creds = Credentials.from_authorized_user_info(token_data, SCOPES)
        if creds.valid:
            return creds
        if creds.expired and creds.refresh_token:
            logger.info("Refreshing expired Tasks token for account %s", account)
            creds.refresh(Request())
            store.save(key, json.loads(creds.to_json()))
            return creds

    label = f" (account={account})" if account != "default" else ""
    raise RuntimeError(
        f"tasks not authenticated{label}. Run `gtasks-mcp auth --account {account}` "
        f"or visit /auth/tasks/setup?account={account} to connect."
    )


def run_installed_app_flow(account: str = "default") -> Credentials:
    """Launch the local browser consent flow and persist the resulting token."""
    flow = InstalledAppFlow.from_client_secrets_file(str(_require_client_secret()), SCOPES)
    creds = flow.run_local_server(port=0)
    _get_token_store().save(_token_key(account), json.loads(creds.to_json()))
    logger.info("Credentials saved for account %s", account)
    return creds


# --- Auth router ---

router = APIRouter(prefix=f"/auth/{INTEGRATION}", tags=["auth"])


@router.get("/setup")
def auth_setup(account: str = "default"):
    """Redirect to Google OAuth consent screen. Use ?account=name for multiple accounts."""
    flow = _create_flow()
    # Encode the account in state so callback knows where to store the token
    auth_url, _ = flow.authorization_url(
        access_type="offline",
        include_granted_scopes="true",
        prompt="consent",
        state=f"{INTEGRATION}:{account}",
    )
    return RedirectResponse(auth_url)


@router.get("/callback")
def auth_callback(code: str, state: str = "") -> StatusResponse:
    """Handle OAuth callback from Google, exchange code for tokens."""
    if ":" in state:
        _, account = state.split(":", 1)
    else:
        account = "default"
    flow = _create_flow()
    flow.fetch_token(code=code)
    creds = flow.credentials
    _get_token_store().save(_token_key(account), json.loads(creds.to_json()))
    return StatusResponse(
        integration=INTEGRATION,
        authenticated=True,
        message=f"tasks account '{account}' authenticated successfully. You can close this tab.",
    )


@router.get("/accounts")
def list_accounts() -> dict:
    """List all authenticated Tasks accounts."""
    return {"accounts": _get_token_store().list_accounts()}


@router.get("/status")
def auth_status(account: str = "default") -> StatusResponse:
    """Check whether an account has a valid token."""
    valid = _get_token_store().has_valid_token(_token_key(account))
    label = f" (account={account})" if account != "default" else ""
    return StatusResponse(
        integration=INTEGRATION,
        authenticated=valid,
        message=f"Authenticated{label}" if valid else f"Not authenticated{label}. Visit /auth/tasks/setup?account={account}",
    )
