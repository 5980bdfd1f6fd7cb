"""Request dependencies shared by the routers.

The settings, credential store and Mailchimp client are created once by
main.create_app() and attached to app.state.
"""

from fastapi import Request

from config import Settings
from mailchimp_client import MailchimpClient
from oauth.stores import CredentialStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> CredentialStore:
    return request.app.state.store


def get_mailchimp(request: Request) -> MailchimpClient:
    return request.app.state.mailchimp
