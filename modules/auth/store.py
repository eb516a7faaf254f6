"""
Supabase-backed user store.

Credentials and accounts live in Supabase Auth; role and display data
live in the profiles table (one row per account, created by a database
trigger on signup).
"""

import logging
from typing import Any, Optional

from supabase import AuthApiError, Client

from shared.database import get_supabase_auth_client
from shared.exceptions import ExternalServiceError
from shared.models import Role
from shared.repository import BaseRepository

from .exceptions import AccountCreationError
from .interfaces import IUserStore
from .models import AuthUser

logger = logging.getLogger(__name__)

LIST_USERS_PAGE_SIZE = 1000


def _to_auth_user(user: Any) -> Optional[AuthUser]:
    if user is None:
        return None
    return AuthUser(id=str(user.id), email=user.email or "")


class SupabaseUserStore(BaseRepository[dict], IUserStore):
    """
    Implementation of IUserStore over a service-role Supabase client.

    Password sign-in goes through a throwaway anon client so the signed-in
    session never lands on the shared service client.
    """

    def __init__(self, db: Client, auth_client_factory=get_supabase_auth_client) -> None:
        super().__init__(db)
        self._auth_client_factory = auth_client_factory

    async def get_user_by_id(self, user_id: str) -> Optional[dict[str, Any]]:
        query = self._db.table("profiles").select("*").eq("id", user_id)
        return self._first(self._execute(query, "load profile"))

    async def get_profile_role(self, user_id: str) -> Role:
        query = self._db.table("profiles").select("role").eq("id", user_id)
        try:
            profile = self._first(self._execute(query, "load profile role"))
        except ExternalServiceError:
            return Role.USER
        return Role.parse(profile.get("role") if profile else None)

    async def get_auth_user(self, user_id: str) -> Optional[AuthUser]:
        try:
            response = self._db.auth.admin.get_user_by_id(user_id)
        except AuthApiError as e:
            logger.info("Auth user %s not found: %s", user_id, e.message)
            return None
        return _to_auth_user(response.user if response else None)

    async def find_user_by_email(self, email: str) -> Optional[AuthUser]:
        wanted = email.strip().lower()
        page = 1
        while True:
            try:
                users = self._db.auth.admin.list_users(page=page, per_page=LIST_USERS_PAGE_SIZE)
            except AuthApiError as e:
                raise ExternalServiceError(
                    "Failed to list users",
                    service="supabase_auth",
                    details={"reason": e.message},
                ) from e

            for user in users:
                if (user.email or "").lower() == wanted:
                    return _to_auth_user(user)

            if len(users) < LIST_USERS_PAGE_SIZE:
                return None
            page += 1

    async def authenticate(self, email: str, password: str) -> Optional[AuthUser]:
        client = self._auth_client_factory()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthApiError as e:
            logger.debug("Password sign-in rejected: %s", e.message)
            return None
        return _to_auth_user(response.user)

    async def create_user(
        self,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> AuthUser:
        try:
            response = self._db.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"username": username or email.split("@")[0]},
            })
        except AuthApiError as e:
            raise AccountCreationError(e.message or "Failed to create account") from e

        user = _to_auth_user(response.user if response else None)
        if user is None:
            raise AccountCreationError()
        return user

    async def update_password(self, user_id: str, password: str) -> None:
        try:
            self._db.auth.admin.update_user_by_id(user_id, {"password": password})
        except AuthApiError as e:
            raise ExternalServiceError(
                "Failed to update password",
                service="supabase_auth",
                details={"reason": e.message},
            ) from e

    async def exchange_code_for_session(self, code: str) -> Optional[AuthUser]:
        client = self._auth_client_factory()
        try:
            response = client.auth.exchange_code_for_session({"auth_code": code})
        except AuthApiError as e:
            logger.warning("OAuth code exchange failed: %s", e.message)
            return None
        return _to_auth_user(response.user)
