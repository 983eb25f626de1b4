"""
Login by username, email or phone number.

``CustomTokenObtainPairSerializer`` calls
``authenticate(identifier=..., password=...)``; this backend resolves
``identifier`` against the three unique user fields.  Email matching is
case-insensitive.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q

User = get_user_model()


class MultiFieldAuthBackend(ModelBackend):

    @staticmethod
    def _lookup(identifier: str):
        identifier = identifier.strip()
        matches = list(
            User.objects.select_related("role").filter(
                Q(username=identifier)
                | Q(email__iexact=identifier)
                | Q(phone_number=identifier)
            )[:2]
        )
        # One account's email equal to another's username is ambiguous.
        return matches[0] if len(matches) == 1 else None

    def authenticate(self, request, identifier=None, password=None, **kwargs):
        if not identifier or password is None:
            return None

        user = self._lookup(identifier)
        if user is None:
            # Hash anyway so unknown identifiers take as long as bad passwords.
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
