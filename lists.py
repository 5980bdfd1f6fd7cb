"""Read-only proxy to a connected account's lists and list members.

The account is picked by the email query parameter and must have completed
the OAuth flow first.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from dependencies import get_mailchimp, get_store
from mailchimp_client import MailchimpClient, MailchimpError
from oauth.stores import CredentialStore

logger = logging.getLogger(__name__)

# Router for list proxy endpoints
router = APIRouter(prefix="/mailchimp", tags=["lists"])


def not_connected_response(email: str) -> JSONResponse:
    return JSONResponse(
        {
            "error": "not_connected",
            "error_description": f"No Mailchimp account connected for {email!r}",
        },
        status_code=404,
    )


def provider_error_response(error: MailchimpError) -> JSONResponse:
    return JSONResponse(error.payload, status_code=500)


@router.get("/lists")
async def list_mailing_lists(
    email: str = "",
    store: CredentialStore = Depends(get_store),
    mailchimp: MailchimpClient = Depends(get_mailchimp),
):
    """Return the lists of the account connected as email."""
    record = store.get(email)
    if record is None:
        logger.info(f"[PROXY] Lists requested for unconnected account: {email}")
        return not_connected_response(email)

    try:
        lists = await mailchimp.get_lists(record.api_endpoint, record.access_token)
    except MailchimpError as e:
        logger.warning(f"[PROXY] Lists request failed for {email}: {e}")
        return provider_error_response(e)
    return JSONResponse(lists)


@router.get("/list/members/{list_id}")
async def list_members(
    list_id: str,
    email: str = "",
    store: CredentialStore = Depends(get_store),
    mailchimp: MailchimpClient = Depends(get_mailchimp),
):
    """Return the members of one list of the account connected as email."""
    record = store.get(email)
    if record is None:
        logger.info(f"[PROXY] Members requested for unconnected account: {email}")
        return not_connected_response(email)

    try:
        members = await mailchimp.get_members(record.api_endpoint, record.access_token, list_id)
    except MailchimpError as e:
        logger.warning(f"[PROXY] Members request failed for {email}, list {list_id}: {e}")
        return provider_error_response(e)
    return JSONResponse(members)
