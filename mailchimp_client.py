"""Async client for the Mailchimp login service and Marketing API.

Every outbound call made by the server goes through MailchimpClient.
Transport failures and unexpected status codes are raised as MailchimpError.
"""

import logging
from typing import Any, Optional

import httpx

from config import Settings

logger = logging.getLogger(__name__)


class MailchimpError(Exception):
    """A Mailchimp call failed in transport or returned an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload if payload is not None else {"error": message}


def _error_payload(response: httpx.Response) -> Any:
    """Mailchimp problem document if the body is JSON, else a summary."""
    try:
        return response.json()
    except ValueError:
        return {"status": response.status_code, "detail": response.text}


class MailchimpClient:
    """Thin wrapper over a shared httpx.AsyncClient."""

    def __init__(self, settings: Settings, http: httpx.AsyncClient):
        self.settings = settings
        self.http = http

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise MailchimpError(
                f"{method} {url} failed: {e}",
                payload={"error": "transport_error", "detail": str(e)},
            ) from e

        if response.is_error:
            raise MailchimpError(
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
                payload=_error_payload(response),
            )
        return response

    async def _json(self, method: str, url: str, **kwargs) -> dict:
        response = await self._request(method, url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise MailchimpError(
                f"{method} {url} returned a non-JSON body",
                status_code=response.status_code,
                payload={"error": "invalid_response", "detail": response.text},
            ) from e

    @staticmethod
    def _oauth_headers(access_token: str) -> dict:
        return {"Accept": "application/json", "Authorization": f"OAuth {access_token}"}

    # ============== OAuth ==============

    async def exchange_code(self, code: str) -> str:
        """Trade an authorization code for an access token."""
        body = await self._json(
            "POST",
            self.settings.token_url,
            data={
                "grant_type": "authorization_code",
                "client_id": self.settings.client_id,
                "client_secret": self.settings.client_secret,
                "redirect_uri": self.settings.redirect_uri,
                "code": code,
            },
        )
        access_token = body.get("access_token") if isinstance(body, dict) else None
        if not access_token:
            raise MailchimpError("Token response did not include an access_token", payload=body)
        return access_token

    async def fetch_metadata(self, access_token: str) -> dict:
        """Fetch login and account metadata for an access token."""
        return await self._json(
            "GET", self.settings.metadata_url, headers=self._oauth_headers(access_token)
        )

    # ============== Marketing API (OAuth token) ==============

    @staticmethod
    def _collection(body, key: str, url: str) -> list:
        """Pull the named array out of a collection response."""
        if not isinstance(body, dict):
            raise MailchimpError(
                f"GET {url} returned a non-object body",
                payload={"error": "invalid_response", "detail": body},
            )
        return body.get(key, [])

    async def get_lists(self, api_endpoint: str, access_token: str) -> list:
        url = f"{api_endpoint}/lists"
        body = await self._json("GET", url, headers=self._oauth_headers(access_token))
        return self._collection(body, "lists", url)

    async def get_members(self, api_endpoint: str, access_token: str, list_id: str) -> list:
        url = f"{api_endpoint}/lists/{list_id}/members"
        body = await self._json("GET", url, headers=self._oauth_headers(access_token))
        return self._collection(body, "members", url)

    # ============== Marketing API (static API key) ==============

    async def add_member(self, email: str, first_name: str, last_name: str) -> httpx.Response:
        """Subscribe a member to the configured signup list.

        Returns the raw response whatever its status; the caller decides what
        counts as success. Only transport failures raise.
        """
        url = self.settings.members_url
        try:
            return await self.http.post(
                url,
                auth=("any", self.settings.api_key),
                json={
                    "email_address": email,
                    "status": "subscribed",
                    "merge_fields": {"FNAME": first_name, "LNAME": last_name},
                },
            )
        except httpx.RequestError as e:
            raise MailchimpError(
                f"POST {url} failed: {e}",
                payload={"error": "transport_error", "detail": str(e)},
            ) from e
