"""Remote access for the ``teams`` and ``participants`` tables."""

from __future__ import annotations

from typing import Any

from ..remote.client import TableClient, row_from
from ..schemas.participant import Participant, Team

TEAMS = "teams"
PARTICIPANTS = "participants"


async def list_teams(client: TableClient, user_id: str) -> list[Team]:
    rows = await client.select(TEAMS, filters={"user_id": user_id}, order="created_at.asc")
    return [Team.model_validate(row) for row in rows]


async def create_team(client: TableClient, user_id: str, team: Team) -> Team:
    row = await client.insert(TEAMS, row_from(team, user_id=user_id))
    return Team.model_validate(row)


async def update_team(client: TableClient, team_id: str, changes: dict[str, Any]) -> Team:
    row = await client.update_one(TEAMS, changes, filters={"id": team_id})
    return Team.model_validate(row)


async def delete_team(client: TableClient, team_id: str) -> None:
    await client.delete(TEAMS, filters={"id": team_id})


async def list_participants(client: TableClient, user_id: str) -> list[Participant]:
    rows = await client.select(PARTICIPANTS, filters={"user_id": user_id}, order="created_at.asc")
    return [Participant.model_validate(row) for row in rows]


async def create_participant(client: TableClient, user_id: str, participant: Participant) -> Participant:
    row = await client.insert(PARTICIPANTS, row_from(participant, user_id=user_id))
    return Participant.model_validate(row)


async def update_participant(client: TableClient, participant_id: str, changes: dict[str, Any]) -> Participant:
    row = await client.update_one(PARTICIPANTS, changes, filters={"id": participant_id})
    return Participant.model_validate(row)


async def delete_participant(client: TableClient, participant_id: str) -> None:
    await client.delete(PARTICIPANTS, filters={"id": participant_id})


async def assign_team(client: TableClient, user_id: str, participant_id: str, team_id: str | None) -> Participant:
    row = await client.update_one(
        PARTICIPANTS,
        {"team_id": team_id},
        filters={"id": participant_id, "user_id": user_id},
    )
    return Participant.model_validate(row)


async def clear_team(client: TableClient, user_id: str, team_id: str) -> None:
    """Detach every member of ``team_id`` before the team row goes away."""
    await client.update(PARTICIPANTS, {"team_id": None}, filters={"team_id": team_id, "user_id": user_id})
