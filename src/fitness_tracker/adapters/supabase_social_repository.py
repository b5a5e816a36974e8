"""Supabase repository for follows and user search."""

import re
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.social import Follow, UserProfileRow
from fitness_tracker.services.social import SocialRepository

_FOLLOW_COLUMNS = "follower_id, following_id, created_at"
_USER_COLUMNS = "id, name, email"
# Characters with meaning inside a PostgREST or() filter.
_FILTER_SYNTAX = re.compile(r"[,()*%\\]")


@dataclass
class SupabaseSocialRepository(SocialRepository):
    """Supabase implementation for follows and user lookup."""

    client: Client

    def get_follow(self, follower_id: UUID, following_id: UUID) -> Follow | None:
        """Return the follow relationship, if any."""
        response = (
            self.client.table("follows")
            .select(_FOLLOW_COLUMNS)
            .eq("follower_id", str(follower_id))
            .eq("following_id", str(following_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_follow(response.data[0])

    def create_follow(
        self, follower_id: UUID, following_id: UUID, created_at: datetime
    ) -> Follow:
        """Create a follow relationship and return it."""
        response = (
            self.client.table("follows")
            .insert(
                {
                    "follower_id": str(follower_id),
                    "following_id": str(following_id),
                    "created_at": created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create follow")
        return _parse_follow(response.data[0])

    def delete_follow(self, follower_id: UUID, following_id: UUID) -> None:
        """Delete a follow relationship."""
        (
            self.client.table("follows")
            .delete()
            .eq("follower_id", str(follower_id))
            .eq("following_id", str(following_id))
            .execute()
        )

    def list_following_ids(self, follower_id: UUID) -> list[UUID]:
        """Return ids of the users the follower follows."""
        response = (
            self.client.table("follows")
            .select("following_id")
            .eq("follower_id", str(follower_id))
            .execute()
        )
        return [UUID(str(row["following_id"])) for row in response.data or []]

    def count_followers(self, user_id: UUID) -> int:
        """Return how many users follow the user."""
        return self._count("following_id", user_id)

    def count_following(self, user_id: UUID) -> int:
        """Return how many users the user follows."""
        return self._count("follower_id", user_id)

    def search_users(
        self, query: str | None, exclude_user_id: UUID, limit: int
    ) -> list[UserProfileRow]:
        """Return users matching name or email, newest first without a query."""
        request = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .neq("id", str(exclude_user_id))
        )
        term = _FILTER_SYNTAX.sub("", query or "").strip()
        if term:
            request = request.or_(f"name.ilike.%{term}%,email.ilike.%{term}%")
        else:
            request = request.order("created_at", desc=True)
        response = request.limit(limit).execute()
        return [_parse_user(row) for row in response.data or []]

    def _count(self, column: str, user_id: UUID) -> int:
        response = (
            self.client.table("follows")
            .select(column, count="exact")
            .eq(column, str(user_id))
            .execute()
        )
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])


def _parse_follow(row: dict[str, object]) -> Follow:
    return Follow(
        follower_id=UUID(str(row["follower_id"])),
        following_id=UUID(str(row["following_id"])),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


def _parse_user(row: dict[str, object]) -> UserProfileRow:
    name = row.get("name")
    email = row.get("email")
    return UserProfileRow(
        user_id=UUID(str(row["id"])),
        name=name if isinstance(name, str) else None,
        email=email if isinstance(email, str) else None,
    )
