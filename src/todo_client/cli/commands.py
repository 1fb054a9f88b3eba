# src/todo_client/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..session.validation import validate_email, validate_password
from ..tasks.task_models import TASK_FIELDS, Task
from .profile_input import parse_profile_args

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /login, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] #{task.id} {task.title}"
    if task.description:
        line += f" ({task.description})"
    return line


def _parse_id(args: list[str], usage: str) -> int:
    if not args:
        raise ValueError(f"Usage: {usage}")
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        raise ValueError(f"Task id must be a number, got {args[0]!r}") from None


def _credential_problem(email: str, password: str) -> str | None:
    if not validate_email(email):
        return "Email address is not valid."
    if not password:
        return "Password is required."
    reqs = validate_password(password)
    if not reqs.all_met:
        return "Password must contain " + ", ".join(reqs.missing()) + "."
    return None


def _parse_bool(raw: str) -> bool:
    val = raw.strip().lower()
    if val in ("1", "true", "yes", "y", "on", "done"):
        return True
    if val in ("0", "false", "no", "n", "off", "todo"):
        return False
    raise ValueError(f"Expected yes/no, got {raw!r}")


# ---- session commands ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    session = state.session
    if not session.is_loaded:
        who = "restoring..."
    elif session.user is not None:
        who = f"{session.user.display_name} <{session.user.email}>"
    else:
        who = "not logged in"
    return (
        "Status:\n"
        f"  Server: {getattr(state.settings, 'api_base_url', '?')}\n"
        f"  Session: {who}\n"
        f"  Tasks loaded: {len(state.tasks)}"
    )


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /login <email> <password>
    """
    if len(args) != 2:
        return "Usage: /login <email> <password>"
    email, password = args
    problem = _credential_problem(email, password)
    if problem:
        return problem

    if emit:
        emit("Logging in...")
    if not await state.session.login(email, password):
        return "Invalid credentials."
    if not state.session.is_authenticated:
        return "Logged in, but the profile could not be loaded. Session dropped; try again."
    return f"Welcome, {state.session.user.display_name}!"


async def cmd_register(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /register <email> <password>  -> create the account, then log in with it
    """
    if len(args) != 2:
        return "Usage: /register <email> <password>"
    email, password = args
    problem = _credential_problem(email, password)
    if problem:
        return problem

    if emit:
        emit("Creating account...")
    if not await state.session.register(email, password):
        return "Registration failed. The email may already be in use."
    if not await state.session.login(email, password):
        return "Account created, but automatic login failed. Use /login."
    return f"Account created. Welcome, {email}!"


async def cmd_google(state: AppState, args: list[str]) -> str:
    if not await state.session.login_with_google():
        return "Google login failed."
    user = state.session.user
    return f"Welcome, {user.display_name}!" if user else "Logged in with Google."


async def cmd_logout(state: AppState, args: list[str]) -> str:
    await state.session.logout()
    return "Logged out."


async def cmd_me(state: AppState, args: list[str]) -> str:
    user = state.session.user
    if user is None:
        return "Not logged in."
    lines = [f"Profile #{user.id}:", f"  Email: {user.email}"]
    for label, value in (
        ("Name", user.name),
        ("Phone", user.phone),
        ("Address", user.address),
        ("Document", user.document_id),
    ):
        if value:
            lines.append(f"  {label}: {value}")
    if user.location is not None:
        lines.append(f"  Location: {user.location.latitude}, {user.location.longitude}")
    if user.profile_picture:
        lines.append("  Picture: set")
    return "\n".join(lines)


async def cmd_profile(state: AppState, args: list[str]) -> str:
    """
    /profile name=Ana phone=555 address=... document=... picture=<file> location=<lat>,<lon>
    """
    if not args:
        return "Usage: /profile key=value ... (keys: name, phone, address, document, picture, location)"
    try:
        fields = parse_profile_args(args)
    except OSError as e:
        return f"Cannot read picture: {e}"
    user = await state.session.update_profile(fields)
    return f"Profile updated for {user.display_name}."


# ---- task commands ----


async def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list [skip] [limit]
    """
    try:
        skip = int(args[0]) if args else 0
        limit = int(args[1]) if len(args) > 1 else None
    except ValueError:
        return "Usage: /list [skip] [limit]"

    tasks = await state.tasks.list_tasks(skip=skip, limit=limit)
    if not tasks:
        return "No tasks."
    return "\n".join(format_task(t) for t in tasks)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [| description]
    """
    text = " ".join(args)
    title, sep, description = text.partition("|")
    title = title.strip()
    if not title:
        return "Usage: /add <title> [| description]"
    desc = description.strip() if sep else ""
    task = await state.tasks.create_task(title, desc or None)
    return f"Added {format_task(task)}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args, "/done <id>")
    task = await state.tasks.toggle_completed(task_id)
    return format_task(task)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> title=... description=... completed=yes|no
    """
    task_id = _parse_id(args, "/edit <id> key=value ...")
    fields: dict[str, str] = {}
    current: str | None = None
    for arg in args[1:]:
        if "=" in arg:
            key, _, value = arg.partition("=")
            current = key.strip().lower()
            fields[current] = value
        elif current is not None:
            fields[current] += " " + arg
        else:
            return "Usage: /edit <id> title=... description=... completed=yes|no"

    unknown = set(fields) - set(TASK_FIELDS)
    if unknown:
        return f"Unknown task field(s): {', '.join(sorted(unknown))}"

    task = await state.tasks.update_task(
        task_id,
        title=fields.get("title"),
        description=fields.get("description"),
        completed=_parse_bool(fields["completed"]) if "completed" in fields else None,
    )
    return f"Updated {format_task(task)}"


async def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args, "/rm <id>")
    task = await state.tasks.delete_task(task_id)
    return f"Deleted #{task.id} {task.title}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show server and session status.")
registry.register("login", cmd_login, help_text="Log in: /login <email> <password>.")
registry.register("register", cmd_register, help_text="Create an account: /register <email> <password>.")
registry.register("google", cmd_google, help_text="Log in with a Google ID token.")
registry.register("logout", cmd_logout, help_text="Log out and forget the stored session.")
registry.register("me", cmd_me, help_text="Show your profile.")
registry.register("profile", cmd_profile, help_text="Update your profile: /profile key=value ...")
registry.register("list", cmd_list, help_text="Reload tasks from the server: /list [skip] [limit].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| description].")
registry.register("done", cmd_done, help_text="Toggle a task's completion: /done <id>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> title=... description=... completed=yes|no.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
