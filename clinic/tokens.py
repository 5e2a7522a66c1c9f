"""
Credential issuing and the identity attached to authenticated requests.

Credentials are simplejwt access tokens signed with ``JWT_SECRET``.  Besides
the subject id they carry the role, email and display name, so the guards
in :mod:`clinic.permissions` can route to the right account table without
a lookup.
"""
from __future__ import annotations

from rest_framework_simplejwt.models import TokenUser
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from .models import Account


class Identity(TokenUser):
    """Stateless request user decoded from a credential."""

    @property
    def id(self) -> int:
        # Some simplejwt releases write the claim as a string
        return int(self.token[api_settings.USER_ID_CLAIM])

    @property
    def role(self) -> str:
        return self.token.get('role', '')

    @property
    def email(self) -> str:
        return self.token.get('email', '')

    @property
    def name(self) -> str:
        return self.token.get('name', '')

    def __str__(self) -> str:
        return f"{self.role}:{self.id}"


def issue_credential(account: Account) -> AccessToken:
    token = AccessToken.for_user(account)
    token['role'] = account.role
    token['email'] = account.email
    token['name'] = account.name
    return token
