"""Participants, teams and the links between them."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from ..crud import teams as remote_teams
from ..schemas.participant import Participant, Team
from .state import EntityList, optimistic, require_text

TEAM_COLORS = [
    {"name": "Red", "value": "bg-red-500/20 text-red-400 border-red-500/30"},
    {"name": "Blue", "value": "bg-blue-500/20 text-blue-400 border-blue-500/30"},
    {"name": "Green", "value": "bg-green-500/20 text-green-400 border-green-500/30"},
    {"name": "Yellow", "value": "bg-yellow-500/20 text-yellow-400 border-yellow-500/30"},
    {"name": "Purple", "value": "bg-purple-500/20 text-purple-400 border-purple-500/30"},
    {"name": "Pink", "value": "bg-pink-500/20 text-pink-400 border-pink-500/30"},
    {"name": "Orange", "value": "bg-orange-500/20 text-orange-400 border-orange-500/30"},
    {"name": "Cyan", "value": "bg-cyan-500/20 text-cyan-400 border-cyan-500/30"},
]

SUGGESTED_SKILLS = [
    "Frontend",
    "Backend",
    "Design",
    "Mobile",
    "AI/ML",
    "DevOps",
    "Data Science",
    "Hardware",
    "Project Management",
    "Marketing",
]

_UNSET: Any = object()


def normalize_skills(skills: Iterable[str] | None) -> list[str]:
    """Trim tags, drop blanks and keep the first occurrence of each."""

    cleaned: list[str] = []
    for skill in skills or ():
        tag = (skill or "").strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class Roster:
    def __init__(self, participants: EntityList[Participant], teams: EntityList[Team], *, user_id: str) -> None:
        self.participants = participants
        self.teams = teams
        self.user_id = user_id

    # ---- lookups and filters

    def get_team(self, team_id: Optional[str]) -> Optional[Team]:
        return self.teams.find(team_id) if team_id else None

    def team_members(self, team_id: str) -> list[Participant]:
        return [p for p in self.participants.items if p.team_id == team_id]

    def filter(self, *, skill: Optional[str] = None, checked_in: Optional[bool] = None) -> list[Participant]:
        matches = []
        for participant in self.participants.items:
            if skill and skill not in participant.skills:
                continue
            if checked_in is not None and participant.checked_in != checked_in:
                continue
            matches.append(participant)
        return matches

    @property
    def all_skills(self) -> list[str]:
        return sorted({skill for p in self.participants.items for skill in p.skills})

    @property
    def checked_in_count(self) -> int:
        return sum(1 for p in self.participants.items if p.checked_in)

    @property
    def unassigned_count(self) -> int:
        return sum(1 for p in self.participants.items if not p.team_id)

    # ---- participants

    async def add_participant(self, name: str, email: str = "", skills: Iterable[str] = ()) -> Participant:
        participant = Participant(
            name=require_text(name, "name"),
            email=(email or "").strip(),
            skills=normalize_skills(skills),
        )
        async with optimistic(self.participants, action="participants.add"):
            self.participants.items.append(participant)
            if self.participants.remote is not None:
                saved = await remote_teams.create_participant(self.participants.remote, self.user_id, participant)
                self.participants.swap(participant.id, saved)
                participant = saved
        return participant

    async def edit_participant(
        self,
        participant_id: str,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        skills: Optional[Iterable[str]] = None,
        team_id: Optional[str] = _UNSET,
        checked_in: Optional[bool] = None,
    ) -> Participant:
        participant = self.participants.get(participant_id)
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = require_text(name, "name")
        if email is not None:
            changes["email"] = email.strip()
        if skills is not None:
            changes["skills"] = normalize_skills(skills)
        if team_id is not _UNSET:
            if team_id is not None:
                self.teams.get(team_id)
            changes["team_id"] = team_id
        if checked_in is not None:
            changes["checked_in"] = bool(checked_in)
        return await self._apply(participant, changes, action="participants.edit")

    async def delete_participant(self, participant_id: str) -> None:
        self.participants.get(participant_id)
        async with optimistic(self.participants, action="participants.delete"):
            self.participants.remove(participant_id)
            if self.participants.remote is not None:
                await remote_teams.delete_participant(self.participants.remote, participant_id)

    async def toggle_check_in(self, participant_id: str) -> Participant:
        participant = self.participants.get(participant_id)
        return await self._apply(
            participant, {"checked_in": not participant.checked_in}, action="participants.check_in"
        )

    async def assign_team(self, participant_id: str, team_id: Optional[str]) -> Participant:
        participant = self.participants.get(participant_id)
        if team_id is not None:
            self.teams.get(team_id)
        async with optimistic(self.participants, action="participants.assign_team"):
            participant.team_id = team_id
            if self.participants.remote is not None:
                await remote_teams.assign_team(self.participants.remote, self.user_id, participant_id, team_id)
        return participant

    async def add_skill(self, participant_id: str, skill: str) -> Participant:
        participant = self.participants.get(participant_id)
        tag = require_text(skill, "skill")
        if tag in participant.skills:
            return participant
        return await self._apply(participant, {"skills": [*participant.skills, tag]}, action="participants.add_skill")

    async def remove_skill(self, participant_id: str, skill: str) -> Participant:
        participant = self.participants.get(participant_id)
        if skill not in participant.skills:
            return participant
        remaining = [s for s in participant.skills if s != skill]
        return await self._apply(participant, {"skills": remaining}, action="participants.remove_skill")

    async def _apply(self, participant: Participant, changes: dict[str, Any], *, action: str) -> Participant:
        if not changes:
            return participant
        async with optimistic(self.participants, action=action):
            for key, value in changes.items():
                setattr(participant, key, value)
            if self.participants.remote is not None:
                await remote_teams.update_participant(self.participants.remote, participant.id, changes)
        return participant

    # ---- teams

    async def add_team(self, name: str, description: str = "", color: Optional[str] = None) -> Team:
        team = Team(
            name=require_text(name, "name"),
            description=(description or "").strip(),
            color=color or TEAM_COLORS[0]["value"],
        )
        async with optimistic(self.teams, action="teams.add"):
            self.teams.items.append(team)
            if self.teams.remote is not None:
                saved = await remote_teams.create_team(self.teams.remote, self.user_id, team)
                self.teams.swap(team.id, saved)
                team = saved
        return team

    async def edit_team(
        self,
        team_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Team:
        team = self.teams.get(team_id)
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = require_text(name, "name")
        if description is not None:
            changes["description"] = description.strip()
        if color:
            changes["color"] = color
        if not changes:
            return team
        async with optimistic(self.teams, action="teams.edit"):
            for key, value in changes.items():
                setattr(team, key, value)
            if self.teams.remote is not None:
                await remote_teams.update_team(self.teams.remote, team_id, changes)
        return team

    async def delete_team(self, team_id: str) -> None:
        """Delete a team and leave its former members unassigned."""

        self.teams.get(team_id)
        async with optimistic(self.teams, self.participants, action="teams.delete"):
            for member in self.team_members(team_id):
                member.team_id = None
            self.teams.remove(team_id)
            if self.participants.remote is not None:
                await remote_teams.clear_team(self.participants.remote, self.user_id, team_id)
            if self.teams.remote is not None:
                await remote_teams.delete_team(self.teams.remote, team_id)
