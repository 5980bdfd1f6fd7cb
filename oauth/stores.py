"""In-memory store for connected Mailchimp accounts.

One record per account email. Records live for the lifetime of the process
and are overwritten by a later successful OAuth exchange for the same email.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CredentialRecord:
    """Credential and metadata for one connected Mailchimp account."""

    identity: str
    access_token: str
    api_endpoint: str
    metadata: dict = field(default_factory=dict)


class CredentialStore:
    """Maps account email -> CredentialRecord."""

    def __init__(self):
        self._records: dict[str, CredentialRecord] = {}

    def save(self, identity: str, record: CredentialRecord) -> None:
        self._records[identity] = record

    def get(self, identity: str) -> Optional[CredentialRecord]:
        """Return the record for identity, or None if it never connected."""
        return self._records.get(identity)

    def __contains__(self, identity: str) -> bool:
        return identity in self._records

    def __len__(self) -> int:
        return len(self._records)
