# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Main entrypoint when running the agent with `python -m puppycoder`.
"""

import json
import logging
import asyncio
import argparse

from dotenv import load_dotenv

from .agent import Agent
from .src.config import settings
from .src.events import EventBus
from .src.events.event_bus_utils import log_to_stdout, TRANSCRIPT_EVENTS
from .src.llm import GenerationClient, usage_report
from .src.llm.providers import OpenAIProvider
from .src.storage import ProjectStore
from .src.tools import describe_tools
from .src.types.event_types import EventType, Event

logging.captureWarnings(True)
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)

CHAT_HELP = """Commands:
  /quit                 leave the chat
  /save                 save the current project
  /new [name]           start a new project
  /load <path|name>     load a saved project
  /tool <name>          enable or disable a tool
  /set <field> <value>  edit a field (project_name, instructions, model, folder_root, auto_continue)
  /help                 show this help
Anything else is sent to the model."""


def setup_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="puppycoder")
    subparsers = parser.add_subparsers(dest="command", required=True)

    chat_parser = subparsers.add_parser("chat", help="Chat with the agent in the terminal")
    chat_parser.add_argument(
        "--project",
        type=str,
        default=None,
        help="Name or path of a saved project to resume",
    )
    chat_parser.add_argument(
        "--auto-continue",
        action="store_true",
        help="Let the agent keep going after tool calls without waiting for you",
    )

    subparsers.add_parser("tools", help="Print the tool catalog as JSON")
    subparsers.add_parser("projects", help="List saved projects")

    return parser


def parse_command(line: str) -> Event | None:
    """Maps one line of terminal input to an input event."""
    if not line.startswith("/"):
        return Event(type=EventType.SEND_MESSAGE, content=line)

    command, _, arg = line[1:].partition(" ")
    arg = arg.strip()
    if command == "quit":
        return Event(type=EventType.QUIT)
    elif command == "save":
        return Event(type=EventType.SAVE_PROJECT)
    elif command == "new":
        return Event(type=EventType.NEW_PROJECT, content=arg)
    elif command == "load":
        return Event(type=EventType.LOAD_PROJECT, content=arg)
    elif command == "tool":
        return Event(type=EventType.TOGGLE_TOOL, content=arg)
    elif command == "set":
        field, _, value = arg.partition(" ")
        return Event(
            type=EventType.EDIT_FIELD, metadata={"field": field, "value": value.strip()}
        )
    return None


async def chat(project: str | None, auto_continue: bool):
    event_bus = await EventBus.get_instance()
    event_bus.subscribe(TRANSCRIPT_EVENTS, log_to_stdout)

    provider = OpenAIProvider(
        api_key=settings.OPENAI_API_KEY, base_url=settings.OPENAI_BASE_URL
    )
    client = GenerationClient(provider)
    agent = Agent(client=client, event_bus=event_bus)

    if project:
        agent.add_project(agent.store.load(project))
    else:
        agent.new_project()
    if auto_continue:
        agent.edit_field("auto_continue", True)

    # Set whenever the active project has no generation in flight
    idle = asyncio.Event()
    idle.set()

    async def track_idle(event: Event):
        active = event.metadata["state"].active
        if active is None or active.in_flight is None:
            idle.set()

    event_bus.subscribe(EventType.STATE_CHANGED, track_idle)

    async def read_input():
        print(CHAT_HELP)
        while True:
            await idle.wait()
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                line = "/quit"
            line = line.strip()
            if not line:
                continue
            if line == "/help":
                print(CHAT_HELP)
                continue

            event = parse_command(line)
            if event is None:
                print(f"Unknown command: {line}")
                continue
            idle.clear()
            event_bus.post(event)
            if event.type == EventType.QUIT:
                return

    reader = asyncio.create_task(read_input())
    try:
        await agent.run()
    finally:
        reader.cancel()
        await client.close()

    print(usage_report())


def list_projects():
    store = ProjectStore(settings.PROJECTS_DIR)
    paths = store.list_projects()
    if not paths:
        print(f"No saved projects in {store.directory}")
        return
    for path in paths:
        print(path)


def main():
    load_dotenv()
    parser = setup_parser()
    args = parser.parse_args()

    if args.command == "chat":
        asyncio.run(chat(args.project, args.auto_continue))
    elif args.command == "tools":
        print(json.dumps(describe_tools(), indent=2))
    elif args.command == "projects":
        list_projects()


if __name__ == "__main__":
    main()
