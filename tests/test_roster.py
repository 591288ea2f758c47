import pytest

from hackops.core.errors import NotFoundError, SyncError
from hackops.services.roster import TEAM_COLORS, normalize_skills
from hackops.services.workspace import Workspace

pytestmark = pytest.mark.anyio


@pytest.fixture()
async def roster(local_storage):
    ws = Workspace("organizer-1", local=local_storage)
    await ws.load()
    return ws.roster


def test_normalize_skills_trims_and_dedupes():
    assert normalize_skills([" Frontend", "Design", "", "Frontend ", None]) == ["Frontend", "Design"]


async def test_filters_and_counts(roster):
    ada = await roster.add_participant("Ada", "ada@example.com", ["Backend", "AI/ML"])
    lin = await roster.add_participant("Lin", skills=["Design"])
    await roster.add_participant("Sam")
    await roster.toggle_check_in(ada.id)
    await roster.toggle_check_in(lin.id)

    assert [p.name for p in roster.filter(skill="Design")] == ["Lin"]
    assert [p.name for p in roster.filter(checked_in=False)] == ["Sam"]
    assert [p.name for p in roster.filter(skill="Backend", checked_in=True)] == ["Ada"]
    assert roster.all_skills == ["AI/ML", "Backend", "Design"]
    assert roster.checked_in_count == 2
    assert roster.unassigned_count == 3


async def test_skills_add_and_remove(roster):
    ada = await roster.add_participant("Ada")

    await roster.add_skill(ada.id, " Hardware ")
    await roster.add_skill(ada.id, "Hardware")
    assert ada.skills == ["Hardware"]

    await roster.remove_skill(ada.id, "Hardware")
    assert ada.skills == []
    with pytest.raises(ValueError, match="skill is required"):
        await roster.add_skill(ada.id, "  ")


async def test_team_assignment_requires_existing_team(roster):
    ada = await roster.add_participant("Ada")
    team = await roster.add_team("Robots")

    assert team.color == TEAM_COLORS[0]["value"]
    with pytest.raises(NotFoundError):
        await roster.assign_team(ada.id, "missing")

    await roster.assign_team(ada.id, team.id)
    assert [p.id for p in roster.team_members(team.id)] == [ada.id]

    await roster.edit_participant(ada.id, team_id=None)
    assert ada.team_id is None


async def test_edit_participant_leaves_team_alone_by_default(roster):
    ada = await roster.add_participant("Ada")
    team = await roster.add_team("Robots")
    await roster.assign_team(ada.id, team.id)

    await roster.edit_participant(ada.id, name="Ada L.", email=" ada@example.com ")

    assert ada.name == "Ada L."
    assert ada.email == "ada@example.com"
    assert ada.team_id == team.id


async def test_delete_team_unassigns_members(roster, local_storage):
    ada = await roster.add_participant("Ada")
    lin = await roster.add_participant("Lin")
    robots = await roster.add_team("Robots")
    wizards = await roster.add_team("Wizards", color=TEAM_COLORS[4]["value"])
    await roster.assign_team(ada.id, robots.id)
    await roster.assign_team(lin.id, wizards.id)

    await roster.delete_team(robots.id)

    assert [t.name for t in roster.teams.items] == ["Wizards"]
    assert roster.participants.get(ada.id).team_id is None
    assert roster.participants.get(lin.id).team_id == wizards.id
    stored = local_storage.load("hackathon-participants", [])
    assert {p["name"]: p["teamId"] for p in stored} == {"Ada": None, "Lin": wizards.id}


async def test_remote_delete_team_rolls_back_both_lists(local_storage, table_client, table_server):
    team = table_server.seed("teams", name="Robots", description="", color="", user_id="organizer-1")
    table_server.seed(
        "participants", name="Ada", email="", skills=[], checked_in=False, team_id=team["id"], user_id="organizer-1"
    )
    ws = Workspace(
        "organizer-1",
        local=local_storage,
        remote=table_client,
        remote_entities=["participants", "teams"],
    )
    await ws.load()

    table_server.fail(500)
    with pytest.raises(SyncError):
        await ws.roster.delete_team(team["id"])

    assert [t.id for t in ws.roster.teams.items] == [team["id"]]
    assert ws.roster.participants.items[0].team_id == team["id"]


async def test_remote_delete_team_clears_rows(local_storage, table_client, table_server):
    team = table_server.seed("teams", name="Robots", description="", color="", user_id="organizer-1")
    table_server.seed(
        "participants", name="Ada", email="", skills=[], checked_in=False, team_id=team["id"], user_id="organizer-1"
    )
    ws = Workspace("organizer-1", local=local_storage, remote=table_client, remote_entities=["participants", "teams"])
    await ws.load()

    await ws.roster.delete_team(team["id"])

    assert table_server.tables["teams"] == []
    assert table_server.tables["participants"][0]["team_id"] is None
