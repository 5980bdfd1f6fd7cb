"""Tests for POST /signup."""

import pytest

from conftest import MEMBERS_URL
from signup import SIGNUP_FAILED, SIGNUP_SUCCESS, is_signup_success


SUBSCRIBER = {"email": "new@example.com", "firstname": "Ada", "lastname": "Lovelace"}


class TestSignupEndpoint:
    def test_success(self, client, provider):
        provider.add("POST", MEMBERS_URL, json_body={"id": "m1", "status": "subscribed"})

        response = client.post("/signup", json=SUBSCRIBER)

        assert response.status_code == 200
        assert response.text == SIGNUP_SUCCESS
        assert provider.body() == {
            "email_address": "new@example.com",
            "status": "subscribed",
            "merge_fields": {"FNAME": "Ada", "LNAME": "Lovelace"},
        }

    def test_member_exists_counts_as_success(self, client, provider):
        provider.add("POST", MEMBERS_URL, status_code=400,
                     json_body={"title": "Member Exists", "status": 400})

        response = client.post("/signup", json=SUBSCRIBER)

        assert response.text == SIGNUP_SUCCESS

    def test_other_400_fails(self, client, provider):
        provider.add("POST", MEMBERS_URL, status_code=400,
                     json_body={"title": "Invalid Resource", "status": 400})

        response = client.post("/signup", json=SUBSCRIBER)

        assert response.text == SIGNUP_FAILED

    def test_server_error_fails(self, client, provider):
        provider.add("POST", MEMBERS_URL, status_code=500, json_body={"title": "Internal Server Error"})

        response = client.post("/signup", json=SUBSCRIBER)

        assert response.text == SIGNUP_FAILED

    def test_transport_error_fails(self, client, provider):
        provider.fail("POST", MEMBERS_URL)

        response = client.post("/signup", json=SUBSCRIBER)

        assert response.text == SIGNUP_FAILED

    def test_accepts_form_body(self, client, provider):
        provider.add("POST", MEMBERS_URL, json_body={"id": "m1"})

        response = client.post("/signup", data=SUBSCRIBER)

        assert response.text == SIGNUP_SUCCESS
        assert provider.body()["email_address"] == "new@example.com"


class TestIsSignupSuccess:
    @pytest.mark.parametrize("status_code,body,expected", [
        (200, {"id": "m1"}, True),
        (204, None, True),
        (400, {"title": "Member Exists"}, True),
        (400, {"title": "Invalid Resource"}, False),
        (400, None, False),
        (401, {"title": "Member Exists"}, False),
        (500, {"title": "Internal Server Error"}, False),
    ])
    def test_status_policy(self, status_code, body, expected):
        assert is_signup_success(status_code, body) is expected
