"""Participant and team endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from ..deps.workspace import get_workspace
from ..schemas.participant import (
    Participant,
    ParticipantCreate,
    ParticipantUpdate,
    RosterSummary,
    SkillPayload,
    Team,
    TeamAssignment,
    TeamCreate,
    TeamOut,
    TeamUpdate,
)
from ..services.roster import SUGGESTED_SKILLS, TEAM_COLORS
from ..services.workspace import Workspace

router = APIRouter(prefix="/api/v1/participants", tags=["participants"])
teams_router = APIRouter(prefix="/api/v1/teams", tags=["teams"])


@router.get("", response_model=list[Participant])
async def api_list(
    skill: Optional[str] = None,
    checked_in: Optional[bool] = None,
    ws: Workspace = Depends(get_workspace),
):
    return ws.roster.filter(skill=skill, checked_in=checked_in)


@router.get("/summary", response_model=RosterSummary)
async def api_summary(ws: Workspace = Depends(get_workspace)):
    roster = ws.roster
    return RosterSummary(
        participants=len(roster.participants),
        checked_in=roster.checked_in_count,
        unassigned=roster.unassigned_count,
        teams=len(roster.teams),
        skills=roster.all_skills,
    )


@router.get("/skills/suggested", response_model=list[str])
async def api_suggested_skills():
    return SUGGESTED_SKILLS


@router.post("", response_model=Participant, status_code=201)
async def api_create(payload: ParticipantCreate, ws: Workspace = Depends(get_workspace)):
    return await ws.roster.add_participant(payload.name, payload.email, payload.skills)


@router.patch("/{participant_id}", response_model=Participant)
async def api_update(participant_id: str, payload: ParticipantUpdate, ws: Workspace = Depends(get_workspace)):
    # Only fields present in the request are changed; an explicit null team unassigns.
    changes = payload.model_dump(exclude_unset=True)
    return await ws.roster.edit_participant(participant_id, **changes)


@router.delete("/{participant_id}")
async def api_delete(participant_id: str, ws: Workspace = Depends(get_workspace)):
    await ws.roster.delete_participant(participant_id)
    return {"status": "deleted"}


@router.post("/{participant_id}/check-in", response_model=Participant)
async def api_toggle_check_in(participant_id: str, ws: Workspace = Depends(get_workspace)):
    return await ws.roster.toggle_check_in(participant_id)


@router.put("/{participant_id}/team", response_model=Participant)
async def api_assign_team(participant_id: str, payload: TeamAssignment, ws: Workspace = Depends(get_workspace)):
    return await ws.roster.assign_team(participant_id, payload.team_id)


@router.post("/{participant_id}/skills", response_model=Participant)
async def api_add_skill(participant_id: str, payload: SkillPayload, ws: Workspace = Depends(get_workspace)):
    return await ws.roster.add_skill(participant_id, payload.skill)


@router.delete("/{participant_id}/skills/{skill}", response_model=Participant)
async def api_remove_skill(participant_id: str, skill: str, ws: Workspace = Depends(get_workspace)):
    return await ws.roster.remove_skill(participant_id, skill)


@teams_router.get("", response_model=list[TeamOut])
async def api_list_teams(ws: Workspace = Depends(get_workspace)):
    roster = ws.roster
    return [
        TeamOut(**team.model_dump(), member_count=len(roster.team_members(team.id)))
        for team in roster.teams.items
    ]


@teams_router.get("/colors")
async def api_team_colors():
    return TEAM_COLORS


@teams_router.get("/{team_id}/members", response_model=list[Participant])
async def api_team_members(team_id: str, ws: Workspace = Depends(get_workspace)):
    ws.roster.teams.get(team_id)
    return ws.roster.team_members(team_id)


@teams_router.post("", response_model=Team, status_code=201)
async def api_create_team(payload: TeamCreate, ws: Workspace = Depends(get_workspace)):
    return await ws.roster.add_team(payload.name, payload.description, payload.color)


@teams_router.patch("/{team_id}", response_model=Team)
async def api_update_team(team_id: str, payload: TeamUpdate, ws: Workspace = Depends(get_workspace)):
    return await ws.roster.edit_team(
        team_id,
        name=payload.name,
        description=payload.description,
        color=payload.color,
    )


@teams_router.delete("/{team_id}")
async def api_delete_team(team_id: str, ws: Workspace = Depends(get_workspace)):
    await ws.roster.delete_team(team_id)
    return {"status": "deleted"}
