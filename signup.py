"""Newsletter signup endpoint.

Adds a subscriber to the configured list using the static API key. This is
independent of the OAuth flow.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from dependencies import get_mailchimp
from mailchimp_client import MailchimpClient, MailchimpError

logger = logging.getLogger(__name__)

# Router for signup endpoint
router = APIRouter(tags=["signup"])

SIGNUP_SUCCESS = "Sign Up Successfully"
SIGNUP_FAILED = "Sign Up Failed"


def is_signup_success(status_code: int, body) -> bool:
    """Any 2xx, or a 400 saying the member is already subscribed."""
    if status_code < 300:
        return True
    return status_code == 400 and isinstance(body, dict) and body.get("title") == "Member Exists"


async def read_body(request: Request) -> dict:
    """Read a JSON or urlencoded form body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
    form = await request.form()
    return dict(form)


@router.post("/signup")
async def signup(request: Request, mailchimp: MailchimpClient = Depends(get_mailchimp)):
    """Subscribe email/firstname/lastname to the signup list."""
    data = await read_body(request)
    email = data.get("email")

    try:
        response = await mailchimp.add_member(email, data.get("firstname"), data.get("lastname"))
    except MailchimpError as e:
        logger.warning(f"[SIGNUP] Request failed for {email}: {e}")
        return PlainTextResponse(SIGNUP_FAILED)

    try:
        body = response.json()
    except ValueError:
        body = None

    if is_signup_success(response.status_code, body):
        logger.info(f"[SIGNUP] Subscribed: {email}")
        return PlainTextResponse(SIGNUP_SUCCESS)

    logger.warning(f"[SIGNUP] Mailchimp returned {response.status_code} for {email}")
    return PlainTextResponse(SIGNUP_FAILED)
