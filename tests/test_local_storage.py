import json

from hackops.crud.local_storage import get_item, list_keys, remove_item, set_item
from hackops.services.storage import migrate_participants


def test_set_item_overwrites_previous_value(session_factory):
    with session_factory() as db:
        set_item(db, "organizer-1", "hackathon-budget", "[]")
        set_item(db, "organizer-1", "hackathon-budget", '[{"id": "b1"}]')
        set_item(db, "organizer-2", "hackathon-budget", "[1]")

        assert get_item(db, "organizer-1", "hackathon-budget") == '[{"id": "b1"}]'
        assert get_item(db, "organizer-2", "hackathon-budget") == "[1]"
        assert list_keys(db, "organizer-1") == ["hackathon-budget"]

        remove_item(db, "organizer-1", "hackathon-budget")
        assert get_item(db, "organizer-1", "hackathon-budget") is None


def test_load_returns_default_for_missing_or_unreadable(local_storage, session_factory):
    assert local_storage.load("hackathon-teams", []) == []

    with session_factory() as db:
        set_item(db, local_storage.owner, "hackathon-teams", "{not json")
    assert local_storage.load("hackathon-teams", ["fallback"]) == ["fallback"]


def test_migrator_output_is_written_back(local_storage, session_factory):
    legacy = [{"id": "p1", "name": "Ada"}, {"name": "Grace", "skills": "oops", "checkedIn": "yes"}, "junk"]
    local_storage.save("hackathon-participants", legacy)

    loaded = local_storage.load("hackathon-participants", [], migrate_participants)

    assert len(loaded) == 2
    ada, grace = loaded
    assert ada["skills"] == [] and ada["checkedIn"] is False and ada["teamId"] is None
    assert ada["email"] == ""
    assert grace["id"]
    assert grace["skills"] == []
    assert grace["checkedIn"] is False
    with session_factory() as db:
        stored = json.loads(get_item(db, local_storage.owner, "hackathon-participants"))
    assert stored == loaded


def test_migrate_participants_rejects_non_lists():
    assert migrate_participants({"name": "Ada"}) == []
    assert migrate_participants(None) == []
