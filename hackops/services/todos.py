"""Todo list with per-todo decision notes."""

from __future__ import annotations

from ..crud import todos as remote_todos
from ..core.errors import NotFoundError
from ..schemas.todo import Decision, Todo
from .state import EntityList, optimistic, require_text


class TodoBoard:
    def __init__(self, todos: EntityList[Todo], *, user_id: str) -> None:
        self.todos = todos
        self.user_id = user_id

    @property
    def items(self) -> list[Todo]:
        return self.todos.items

    @property
    def completed_count(self) -> int:
        return sum(1 for todo in self.items if todo.completed)

    async def add(self, title: str) -> Todo:
        title = require_text(title, "title")
        todo = Todo(title=title)
        async with optimistic(self.todos, action="todos.add"):
            self.todos.items.append(todo)
            if self.todos.remote is not None:
                saved = await remote_todos.create_todo(self.todos.remote, self.user_id, title)
                self.todos.swap(todo.id, saved)
                todo = saved
        return todo

    async def toggle(self, todo_id: str) -> Todo:
        todo = self.todos.get(todo_id)
        async with optimistic(self.todos, action="todos.toggle"):
            todo.completed = not todo.completed
            if self.todos.remote is not None:
                await remote_todos.set_todo_completed(self.todos.remote, todo_id, todo.completed)
        return todo

    async def rename(self, todo_id: str, title: str) -> Todo:
        title = require_text(title, "title")
        todo = self.todos.get(todo_id)
        async with optimistic(self.todos, action="todos.rename"):
            todo.title = title
            if self.todos.remote is not None:
                await remote_todos.rename_todo(self.todos.remote, todo_id, title)
        return todo

    async def delete(self, todo_id: str) -> None:
        self.todos.get(todo_id)
        async with optimistic(self.todos, action="todos.delete"):
            self.todos.remove(todo_id)
            if self.todos.remote is not None:
                await remote_todos.delete_todo(self.todos.remote, todo_id)

    async def add_decision(self, todo_id: str, text: str) -> Decision:
        text = require_text(text, "decision")
        todo = self.todos.get(todo_id)
        decision = Decision(text=text)
        async with optimistic(self.todos, action="decisions.add"):
            todo.decisions.append(decision)
            if self.todos.remote is not None:
                saved = await remote_todos.create_decision(self.todos.remote, todo_id, text)
                todo.decisions[-1] = saved
                decision = saved
        return decision

    async def edit_decision(self, todo_id: str, decision_id: str, text: str) -> Decision:
        text = require_text(text, "decision")
        decision = self._decision(todo_id, decision_id)
        async with optimistic(self.todos, action="decisions.edit"):
            decision.text = text
            if self.todos.remote is not None:
                await remote_todos.update_decision(self.todos.remote, decision_id, text)
        return decision

    async def delete_decision(self, todo_id: str, decision_id: str) -> None:
        todo = self.todos.get(todo_id)
        self._decision(todo_id, decision_id)
        async with optimistic(self.todos, action="decisions.delete"):
            todo.decisions = [d for d in todo.decisions if d.id != decision_id]
            if self.todos.remote is not None:
                await remote_todos.delete_decision(self.todos.remote, decision_id)

    def _decision(self, todo_id: str, decision_id: str) -> Decision:
        todo = self.todos.get(todo_id)
        for decision in todo.decisions:
            if decision.id == decision_id:
                return decision
        raise NotFoundError(f"decision {decision_id} not found")
