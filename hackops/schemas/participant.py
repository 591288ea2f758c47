from __future__ import annotations

from typing import Optional

from pydantic import Field

from .common import CamelModel, Record


class Participant(Record):
    name: str
    email: str = ""
    skills: list[str] = Field(default_factory=list)
    checked_in: bool = False
    team_id: Optional[str] = None


class Team(Record):
    name: str
    description: str = ""
    color: str = ""


class ParticipantCreate(CamelModel):
    name: str
    email: str = ""
    skills: list[str] = Field(default_factory=list)


class ParticipantUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    skills: Optional[list[str]] = None
    team_id: Optional[str] = None
    checked_in: Optional[bool] = None


class TeamAssignment(CamelModel):
    team_id: Optional[str] = None


class SkillPayload(CamelModel):
    skill: str


class TeamCreate(CamelModel):
    name: str
    description: str = ""
    color: Optional[str] = None


class TeamUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class TeamOut(Team):
    member_count: int = 0


class RosterSummary(CamelModel):
    participants: int
    checked_in: int
    unassigned: int
    teams: int
    skills: list[str]
