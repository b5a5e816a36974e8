"""Supabase repository for challenges and participations."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.challenges import (
    ChallengeDefinition,
    ChallengeType,
    Participation,
)
from fitness_tracker.services.challenges import ChallengeRepository

_CHALLENGE_COLUMNS = (
    "id, creator_id, name, description, challenge_type, goal_value, "
    "start_date, end_date, is_public"
)
_PARTICIPATION_COLUMNS = "challenge_id, user_id, joined_at"


@dataclass
class SupabaseChallengeRepository(ChallengeRepository):
    """Supabase implementation for challenges."""

    client: Client

    def create_challenge(  # noqa: PLR0913
        self,
        creator_id: UUID,
        name: str,
        description: str | None,
        challenge_type: ChallengeType,
        goal_value: float,
        start_date: date,
        end_date: date,
        is_public: bool,
    ) -> ChallengeDefinition:
        """Create a challenge row and return it."""
        response = (
            self.client.table("challenges")
            .insert(
                {
                    "creator_id": str(creator_id),
                    "name": name,
                    "description": description,
                    "challenge_type": ChallengeType(challenge_type).value,
                    "goal_value": goal_value,
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "is_public": is_public,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create challenge")
        return _parse_challenge(response.data[0])

    def get_challenge(self, challenge_id: UUID) -> ChallengeDefinition | None:
        """Return a challenge by id."""
        response = (
            self.client.table("challenges")
            .select(_CHALLENGE_COLUMNS)
            .eq("id", str(challenge_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_challenge(response.data[0])

    def list_public_challenges(self, as_of: date) -> list[ChallengeDefinition]:
        """Return public challenges ending on or after the given date."""
        response = (
            self.client.table("challenges")
            .select(_CHALLENGE_COLUMNS)
            .eq("is_public", True)
            .gte("end_date", as_of.isoformat())
            .order("start_date", desc=False)
            .execute()
        )
        return [_parse_challenge(row) for row in response.data or []]

    def list_user_challenges(self, user_id: UUID) -> list[ChallengeDefinition]:
        """Return challenges the user created or participates in."""
        joined = (
            self.client.table("challenge_participations")
            .select("challenge_id")
            .eq("user_id", str(user_id))
            .execute()
        )
        joined_ids = [str(row["challenge_id"]) for row in joined.data or []]
        created = (
            self.client.table("challenges")
            .select(_CHALLENGE_COLUMNS)
            .eq("creator_id", str(user_id))
            .execute()
        )
        rows = list(created.data or [])
        if joined_ids:
            participating = (
                self.client.table("challenges")
                .select(_CHALLENGE_COLUMNS)
                .in_("id", joined_ids)
                .execute()
            )
            rows.extend(participating.data or [])
        challenges: dict[UUID, ChallengeDefinition] = {}
        for row in rows:
            challenge = _parse_challenge(row)
            challenges.setdefault(challenge.id, challenge)
        return sorted(
            challenges.values(), key=lambda item: item.start_date, reverse=True
        )

    def get_participation(
        self, challenge_id: UUID, user_id: UUID
    ) -> Participation | None:
        """Return the user's participation, if any."""
        response = (
            self.client.table("challenge_participations")
            .select(_PARTICIPATION_COLUMNS)
            .eq("challenge_id", str(challenge_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_participation(response.data[0])

    def create_participation(
        self, challenge_id: UUID, user_id: UUID, joined_at: datetime
    ) -> Participation:
        """Create a participation row."""
        response = (
            self.client.table("challenge_participations")
            .insert(
                {
                    "challenge_id": str(challenge_id),
                    "user_id": str(user_id),
                    "joined_at": joined_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create challenge participation")
        return _parse_participation(response.data[0])

    def delete_participation(self, challenge_id: UUID, user_id: UUID) -> None:
        """Delete a participation row."""
        self.client.table("challenge_participations").delete().eq(
            "challenge_id", str(challenge_id)
        ).eq("user_id", str(user_id)).execute()

    def list_participations(self, challenge_id: UUID) -> list[Participation]:
        """Return all participations for a challenge."""
        response = (
            self.client.table("challenge_participations")
            .select(_PARTICIPATION_COLUMNS)
            .eq("challenge_id", str(challenge_id))
            .order("joined_at", desc=False)
            .execute()
        )
        return [_parse_participation(row) for row in response.data or []]


def _parse_challenge(row: dict[str, object]) -> ChallengeDefinition:
    creator_raw = row.get("creator_id")
    description = row.get("description")
    return ChallengeDefinition(
        id=UUID(str(row["id"])),
        creator_id=UUID(str(creator_raw)) if creator_raw else None,
        name=str(row.get("name") or ""),
        description=description if isinstance(description, str) else None,
        challenge_type=ChallengeType(row["challenge_type"]),
        goal_value=float(row.get("goal_value") or 0.0),
        start_date=date.fromisoformat(str(row["start_date"])[:10]),
        end_date=date.fromisoformat(str(row["end_date"])[:10]),
        is_public=bool(row.get("is_public", True)),
    )


def _parse_participation(row: dict[str, object]) -> Participation:
    return Participation(
        challenge_id=UUID(str(row["challenge_id"])),
        user_id=UUID(str(row["user_id"])),
        joined_at=datetime.fromisoformat(str(row["joined_at"])),
    )
