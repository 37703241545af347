"""Operator console for the portfolio admin functions.

Usage:
    uv run python bin/portfolio-admin.py list <table>
    uv run python bin/portfolio-admin.py get <table> <id>
    uv run python bin/portfolio-admin.py create <table> '<json object>'
    uv run python bin/portfolio-admin.py update <table> <id> '<json object>'
    uv run python bin/portfolio-admin.py delete <table> <id>
    uv run python bin/portfolio-admin.py write <action> '<content>'
    uv run python bin/portfolio-admin.py image '<title>' [category]

The admin secret is read from ADMIN_SECRET or prompted for. It is exchanged
for a short-lived token and never stored. Point CONSOLE_BASE_URL at the
portal server.
"""

import asyncio
import getpass
import json
import os
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from console.api import AdminApiClient, ApiError
from console.session import AdminSessionManager
from console.settings import ConsoleSettings

USAGE = __doc__.split("\n\n")[1]

# command -> number of positional arguments after the command name
COMMANDS = {
    "list": (1, 1),
    "get": (2, 2),
    "create": (2, 2),
    "update": (3, 3),
    "delete": (2, 2),
    "write": (2, 2),
    "image": (1, 2),
}


def _parse_object(raw: str) -> dict:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON: {e}")
        sys.exit(1)
    if not isinstance(data, dict):
        print("Error: data must be a JSON object")
        sys.exit(1)
    return data


async def run(api: AdminApiClient, token: str, command: str, args: list[str]) -> object:
    if command == "list":
        return await api.list_records(token, args[0])
    if command == "get":
        return await api.get_record(token, args[0], args[1])
    if command == "create":
        return await api.create_record(token, args[0], _parse_object(args[1]))
    if command == "update":
        return await api.update_record(token, args[0], args[1], _parse_object(args[2]))
    if command == "delete":
        await api.delete_record(token, args[0], args[1])
        return {"deleted": args[1]}
    if command == "write":
        return {"text": await api.generate_text(token, args[0], args[1])}
    category = args[1] if len(args) > 1 else None
    return {"url": await api.generate_image(token, args[0], category=category)}


async def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        print(USAGE)
        sys.exit(1)

    command, args = sys.argv[1], sys.argv[2:]
    min_args, max_args = COMMANDS[command]
    if not min_args <= len(args) <= max_args:
        print(USAGE)
        sys.exit(1)

    settings = ConsoleSettings()
    api = AdminApiClient.from_settings(settings)
    session = AdminSessionManager(
        api,
        inactivity_timeout=settings.inactivity_timeout_seconds,
        check_interval=settings.check_interval_seconds,
    )

    secret = os.environ.get("ADMIN_SECRET") or getpass.getpass("Admin secret: ")
    try:
        if not await session.login(secret):
            print(f"Error: {session.last_error}")
            sys.exit(1)
        result = await run(api, session.require_token(), command, args)
    except ApiError as e:
        print(f"Error ({e.status}): {e.message}")
        sys.exit(1)
    finally:
        await session.logout()

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
