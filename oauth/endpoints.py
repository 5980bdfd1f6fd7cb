"""Mailchimp OAuth2 endpoints.

- /mailchimp/auth/authorize: redirect the operator to Mailchimp's login page
- /mailchimp/auth/callback: exchange the code, fetch account metadata and
  store the credential against the account email
"""

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, RedirectResponse

from config import Settings
from dependencies import get_mailchimp, get_settings, get_store
from mailchimp_client import MailchimpClient, MailchimpError
from oauth.stores import CredentialRecord, CredentialStore

logger = logging.getLogger(__name__)

# Router for OAuth endpoints
router = APIRouter(prefix="/mailchimp/auth", tags=["oauth"])

TOKEN_ERROR = "An unexpected error occurred while trying to perform MailChimp oAuth"
METADATA_ERROR = "An unexpected error occurred while trying to get MailChimp meta oAuth"
IDENTITY_ERROR = "MailChimp metadata did not include an account email"
ENDPOINT_ERROR = "MailChimp metadata did not include an API endpoint"

LIST_PICKER_PAGE = "/pick-a-list.html"


class IncompleteMetadataError(Exception):
    """Metadata lacks a field the credential record needs."""


class MissingIdentityError(IncompleteMetadataError):
    """Metadata came back without login.email."""


class MissingEndpointError(IncompleteMetadataError):
    """Metadata came back without api_endpoint."""


def build_record(access_token: str, metadata: dict, api_version: str) -> CredentialRecord:
    """Combine the token and metadata into a CredentialRecord.

    Raises MissingIdentityError when the metadata has no login email and
    MissingEndpointError when it has no api_endpoint.
    """
    login = metadata.get("login") if isinstance(metadata, dict) else None
    identity = login.get("email") if isinstance(login, dict) else None
    if not identity:
        raise MissingIdentityError(IDENTITY_ERROR)

    base_url = metadata.get("api_endpoint")
    if not isinstance(base_url, str) or not base_url.rstrip("/"):
        raise MissingEndpointError(ENDPOINT_ERROR)

    api_endpoint = f"{base_url.rstrip('/')}/{api_version}"
    return CredentialRecord(
        identity=identity,
        access_token=access_token,
        api_endpoint=api_endpoint,
        metadata=metadata,
    )


@router.get("/authorize")
async def authorize(settings: Settings = Depends(get_settings)):
    """Redirect to the Mailchimp authorization endpoint."""
    params = {
        "response_type": "code",
        "client_id": settings.client_id,
        "redirect_uri": settings.redirect_uri,
    }
    return RedirectResponse(url=f"{settings.authorize_url}?{urlencode(params)}", status_code=302)


@router.get("/callback")
async def callback(
    code: str = "",
    error: str = "",
    settings: Settings = Depends(get_settings),
    store: CredentialStore = Depends(get_store),
    mailchimp: MailchimpClient = Depends(get_mailchimp),
):
    """Finish the OAuth flow: token exchange -> metadata fetch -> save."""
    if not code:
        logger.warning(f"[OAUTH] Callback without code (error: {error or 'none'})")
        return PlainTextResponse(TOKEN_ERROR)

    try:
        access_token = await mailchimp.exchange_code(code)
    except MailchimpError as e:
        logger.warning(f"[OAUTH] Token exchange failed: {e}")
        return PlainTextResponse(TOKEN_ERROR)

    try:
        metadata = await mailchimp.fetch_metadata(access_token)
    except MailchimpError as e:
        logger.warning(f"[OAUTH] Metadata fetch failed: {e}")
        return PlainTextResponse(METADATA_ERROR)

    try:
        record = build_record(access_token, metadata, settings.api_version)
    except IncompleteMetadataError as e:
        logger.warning(f"[OAUTH] Incomplete metadata, credential not saved: {e}")
        return PlainTextResponse(str(e))

    store.save(record.identity, record)
    logger.info(f"[OAUTH] Account connected: {record.identity}")

    return RedirectResponse(
        url=f"{LIST_PICKER_PAGE}?{urlencode({'email': record.identity})}",
        status_code=302,
    )
