"""Tests for the in-memory credential store."""

from oauth.stores import CredentialRecord, CredentialStore


def make_record(identity="u@example.com", token="tok"):
    return CredentialRecord(
        identity=identity,
        access_token=token,
        api_endpoint="https://us14.api.mailchimp.com/3.0",
        metadata={"dc": "us14", "login": {"email": identity}},
    )


class TestCredentialStore:
    def test_get_unknown_identity_returns_none(self):
        store = CredentialStore()
        assert store.get("nobody@example.com") is None
        assert "nobody@example.com" not in store

    def test_save_then_get(self):
        store = CredentialStore()
        record = make_record()
        store.save("u@example.com", record)

        assert store.get("u@example.com") is record
        assert "u@example.com" in store

    def test_save_twice_keeps_latest(self):
        store = CredentialStore()
        store.save("u@example.com", make_record(token="first"))
        second = make_record(token="second")
        store.save("u@example.com", second)

        assert len(store) == 1
        assert store.get("u@example.com") == second

    def test_identities_are_independent(self):
        store = CredentialStore()
        store.save("a@example.com", make_record("a@example.com", "tok-a"))
        store.save("b@example.com", make_record("b@example.com", "tok-b"))

        assert len(store) == 2
        assert store.get("a@example.com").access_token == "tok-a"
        assert store.get("b@example.com").access_token == "tok-b"

    def test_stores_do_not_share_state(self):
        first, second = CredentialStore(), CredentialStore()
        first.save("u@example.com", make_record())
        assert second.get("u@example.com") is None

    def test_metadata_defaults_to_empty_dict(self):
        record = CredentialRecord(identity="u@example.com", access_token="tok", api_endpoint="https://x")
        assert record.metadata == {}
