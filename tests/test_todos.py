import pytest

from hackops.core.errors import NotFoundError, SyncError
from hackops.crud.todos import list_decisions
from hackops.services.workspace import Workspace

pytestmark = pytest.mark.anyio


@pytest.fixture()
async def local_workspace(local_storage):
    ws = Workspace("organizer-1", local=local_storage)
    await ws.load()
    return ws


@pytest.fixture()
async def remote_workspace(local_storage, table_client, table_server):
    table_server.seed("todos", title="Book venue", completed=False, user_id="organizer-1")
    todo = table_server.seed("todos", title="Order pizza", completed=True, user_id="organizer-1")
    table_server.seed("todos", title="Someone else's", completed=False, user_id="organizer-2")
    table_server.seed("decisions", text="Second call", todo_id=todo["id"], created_at="2024-05-02T09:00:00Z")
    table_server.seed("decisions", text="First call", todo_id=todo["id"], created_at="2024-05-02T08:00:00Z")
    ws = Workspace("organizer-1", local=local_storage, remote=table_client, remote_entities=["todos"])
    await ws.load()
    return ws


async def test_local_todos_survive_reload(local_workspace, local_storage):
    todo = await local_workspace.todos.add("  Print badges ")
    await local_workspace.todos.toggle(todo.id)
    decision = await local_workspace.todos.add_decision(todo.id, "Use the cheap printer")

    reloaded = Workspace("organizer-1", local=local_storage)
    await reloaded.load()

    [stored] = reloaded.todos.items
    assert stored.title == "Print badges"
    assert stored.completed is True
    assert [d.id for d in stored.decisions] == [decision.id]
    assert reloaded.todos.completed_count == 1


async def test_empty_title_is_rejected(local_workspace):
    with pytest.raises(ValueError, match="title is required"):
        await local_workspace.todos.add("   ")
    assert local_workspace.todos.items == []


async def test_unknown_todo_raises_not_found(local_workspace):
    with pytest.raises(NotFoundError):
        await local_workspace.todos.toggle("missing")


async def test_decisions_can_be_edited_and_deleted(local_workspace):
    todo = await local_workspace.todos.add("Pick a theme")
    first = await local_workspace.todos.add_decision(todo.id, "Space")
    second = await local_workspace.todos.add_decision(todo.id, "Oceans")

    await local_workspace.todos.edit_decision(todo.id, first.id, "Outer space")
    await local_workspace.todos.delete_decision(todo.id, second.id)

    assert [d.text for d in local_workspace.todos.items[0].decisions] == ["Outer space"]
    with pytest.raises(NotFoundError):
        await local_workspace.todos.delete_decision(todo.id, second.id)


async def test_remote_load_is_scoped_and_orders_decisions(remote_workspace):
    titles = [t.title for t in remote_workspace.todos.items]
    assert titles == ["Order pizza", "Book venue"]
    pizza = remote_workspace.todos.items[0]
    assert [d.text for d in pizza.decisions] == ["First call", "Second call"]


async def test_remote_add_uses_server_identity(remote_workspace, table_server):
    todo = await remote_workspace.todos.add("Rent chairs")

    assert todo.id.startswith("todos-")
    assert remote_workspace.todos.items[-1].id == todo.id
    assert any(r["title"] == "Rent chairs" for r in table_server.tables["todos"])


async def test_remote_failure_rolls_back_toggle(remote_workspace, table_server):
    venue = remote_workspace.todos.items[1]
    table_server.fail(500)

    with pytest.raises(SyncError) as excinfo:
        await remote_workspace.todos.toggle(venue.id)

    assert excinfo.value.action == "todos.toggle"
    assert remote_workspace.todos.items[1].completed is False


async def test_remote_failure_rolls_back_delete(remote_workspace, table_server):
    table_server.fail(503)

    with pytest.raises(SyncError):
        await remote_workspace.todos.delete(remote_workspace.todos.items[0].id)

    assert len(remote_workspace.todos.items) == 2


async def test_remote_todos_are_not_written_locally(remote_workspace, local_storage):
    await remote_workspace.todos.add("Rent chairs")

    assert local_storage.load("hackathon-todos", None) is None


async def test_list_decisions_is_newest_first(table_client, table_server):
    table_server.seed("decisions", text="Older", todo_id="todo-1", created_at="2024-05-02T08:00:00Z")
    table_server.seed("decisions", text="Newer", todo_id="todo-1", created_at="2024-05-02T09:00:00Z")
    table_server.seed("decisions", text="Elsewhere", todo_id="todo-2")

    decisions = await list_decisions(table_client, "todo-1")

    assert [d.text for d in decisions] == ["Newer", "Older"]
