# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The orchestration loop.

A single asyncio task owns every project and its history. It waits on two
sources at once, front-end events from the EventBus and generation results
from the GenerationClient, and handles whichever arrives first. Generation
tasks never touch project state; they only deliver results.
"""

import asyncio
import logging

from pathlib import Path
from pydantic import TypeAdapter

from .src.config import settings
from .src.events import EventBus
from .src.llm import GenerationClient, GenRequest, GenResult, GenError
from .src.storage import ProjectStore
from .src.tools import ToolDispatcher, tool_registry
from .src.types.event_types import EventType, Event, EDITABLE_FIELDS
from .src.types.llm_types import (
    Model,
    SystemMessage,
    UserMessage,
    ToolCall,
    ToolResponseMessage,
)
from .src.types.project_types import Project, State

logger = logging.getLogger(__name__)


def build_preamble(project: Project) -> SystemMessage | None:
    """Renders the project's instructions, memories and open todos.

    The preamble is prepended to each request but never stored in History.
    """
    parts = []
    if project.instructions:
        parts.append(project.instructions)
    if project.memories:
        parts.append(
            "Your memories:\n"
            + "\n".join(f"- {m.name}: {m.content}" for m in project.memories)
        )
    open_todos = project.open_todos()
    if open_todos:
        parts.append(
            "Your open todo items:\n"
            + "\n".join(f"- {t.name}: {t.content}" for t in open_todos)
        )
    if not parts:
        return None
    return SystemMessage(text="\n\n".join(parts))


class Agent:
    """
    The Agent class acts as the 'root' of the application state: the list of
    projects, which one is active, and the unsent draft message.
    """

    def __init__(
        self,
        client: GenerationClient,
        event_bus: EventBus,
        store: ProjectStore | None = None,
        dispatcher: ToolDispatcher | None = None,
    ):
        self.client = client
        self.event_bus = event_bus
        self.store = store if store else ProjectStore(settings.PROJECTS_DIR)
        self.dispatcher = dispatcher if dispatcher else ToolDispatcher()
        self.state = State()

        # Maps in-flight request ids to the project that issued them
        self._requests: dict[str, Project] = {}

    # Projects ----------------------------------------------------------------

    @property
    def active_project(self) -> Project | None:
        return self.state.active

    def new_project(self, name: str | None = None) -> Project:
        project = Project(
            name=name or f"project-{len(self.state.projects) + 1}",
            model=settings.MODEL,
            folder_root=settings.WORKDIR,
            forbidden_files=list(settings.FORBIDDEN_FILES),
            enabled_tools=list(tool_registry),
        )
        self.add_project(project)
        return project

    def add_project(self, project: Project) -> int:
        """Adds a project and makes it active. Returns its index.

        Raises:
            ValueError: if the project enables a tool that does not exist
        """
        unknown = [name for name in project.enabled_tools if name not in tool_registry]
        if unknown:
            raise ValueError(f"project {project.name} enables unknown tools: {unknown}")

        project.folder_root.mkdir(parents=True, exist_ok=True)
        self.state.projects.append(project)
        self.state.active_project = len(self.state.projects) - 1
        return self.state.active_project

    def select_project(self, index: int) -> None:
        if not 0 <= index < len(self.state.projects):
            raise IndexError(f"no project at index {index}")
        self.state.active_project = index

    def toggle_tool(self, name: str) -> None:
        project = self._require_active()
        if name not in tool_registry:
            raise ValueError(f"unknown tool: {name}")
        enabled = set(project.enabled_tools) ^ {name}
        project.enabled_tools = [n for n in tool_registry if n in enabled]

    def edit_field(self, field: str, value) -> None:
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"field {field!r} cannot be edited")
        if field == "message":
            self.state.draft_message = str(value)
            return

        project = self._require_active()
        if field == "project_name":
            project.name = str(value)
        elif field == "instructions":
            project.instructions = str(value)
        elif field == "model":
            project.model = Model(value)
        elif field == "folder_root":
            project.folder_root = Path(value)
            project.folder_root.mkdir(parents=True, exist_ok=True)
        elif field == "auto_continue":
            project.auto_continue = TypeAdapter(bool).validate_python(value)

    def _require_active(self) -> Project:
        project = self.active_project
        if project is None:
            raise ValueError("no project is selected")
        return project

    # Conversation ------------------------------------------------------------

    def send_message(self, text: str = "") -> None:
        """Sends a user message on the active project.

        An empty text sends (and clears) the draft message. While a
        generation is in flight the message waits on the project and is sent
        once the result has been handled.
        """
        if not text:
            text, self.state.draft_message = self.state.draft_message, ""
        if not text.strip():
            return

        project = self.active_project or self.new_project()
        if project.in_flight is not None:
            logger.info(f"Generation in flight for {project.name}; queueing message")
            project._pending.append(text)
            return

        project.history.append(UserMessage(text=text))
        project._auto_rounds = 0
        self._submit(project)

    def _submit(self, project: Project) -> GenRequest:
        messages = list(project.history.context())
        preamble = build_preamble(project)
        if preamble is not None:
            messages.insert(0, preamble)

        request = GenRequest(
            model=project.model,
            messages=tuple(messages),
            tools=tuple(project.enabled_tools),
        )
        project._in_flight = request.request_id
        self._requests[request.request_id] = project
        self.client.submit(request)
        logger.debug(f"Submitted request {request.request_id} for {project.name}")
        return request

    async def handle_result(self, result: GenResult) -> None:
        project = self._requests.pop(result.request_id, None)
        if project is None or project.in_flight != result.request_id:
            logger.warning(f"Dropping result for unknown request {result.request_id}")
            return
        project._in_flight = None

        made_tool_calls = False
        if isinstance(result, GenError):
            project.last_error = f"{result.kind} error: {result.description}"
            if result.status_code is not None:
                project.last_error += f" (status {result.status_code})"
            logger.error(f"Generation failed for {project.name}: {project.last_error}")
            await self.event_bus.publish(
                Event(type=EventType.APPLICATION_ERROR, content=project.last_error)
            )
        else:
            project.last_error = None
            project.record_usage(result.usage, result.input_cost, result.output_cost)
            project.history.append(result.message)
            if result.message.text:
                await self.event_bus.publish(
                    Event(type=EventType.ASSISTANT_MESSAGE, content=result.message.text)
                )
            for tool_call in result.message.tool_calls:
                await self._run_tool_call(project, tool_call)
            made_tool_calls = bool(result.message.tool_calls)

        self._advance(project, made_tool_calls)

    async def _run_tool_call(self, project: Project, tool_call: ToolCall) -> None:
        await self.event_bus.publish(
            Event(
                type=EventType.TOOL_CALL,
                content=tool_call.arguments,
                metadata=dict(call_id=tool_call.id, name=tool_call.name),
            )
        )
        tool_result = await self.dispatcher.dispatch(project, tool_call)
        response_text = tool_result.to_response_text()
        project.history.append(
            ToolResponseMessage(call_id=tool_call.id, text=response_text)
        )
        await self.event_bus.publish(
            Event(
                type=EventType.TOOL_RESULT,
                content=response_text,
                metadata=dict(call_id=tool_call.id, tool_result=tool_result),
            )
        )

    def _advance(self, project: Project, made_tool_calls: bool) -> None:
        """Starts the project's next round, if there is one to start."""
        if project._pending:
            while project._pending:
                project.history.append(UserMessage(text=project._pending.popleft()))
            project._auto_rounds = 0
            self._submit(project)
        elif made_tool_calls and project.auto_continue:
            if project._auto_rounds >= settings.MAX_AUTO_ROUNDS:
                logger.info(
                    f"Reached {settings.MAX_AUTO_ROUNDS} automatic rounds for {project.name}"
                )
                return
            project._auto_rounds += 1
            self._submit(project)

    # Events ------------------------------------------------------------------

    async def handle_event(self, event: Event) -> None:
        try:
            if event.type == EventType.SEND_MESSAGE:
                self.send_message(event.content)
            elif event.type == EventType.SELECT_PROJECT:
                self.select_project(int(event.metadata["index"]))
            elif event.type == EventType.TOGGLE_TOOL:
                self.toggle_tool(event.content)
            elif event.type == EventType.EDIT_FIELD:
                self.edit_field(event.metadata["field"], event.metadata["value"])
            elif event.type == EventType.NEW_PROJECT:
                self.new_project(event.content or None)
            elif event.type == EventType.SAVE_PROJECT:
                self.store.save(self._require_active())
            elif event.type == EventType.LOAD_PROJECT:
                self.add_project(self.store.load(event.content))
            else:
                logger.warning(f"Ignoring unexpected event {event.type}")
        except (ValueError, IndexError, KeyError, OSError) as e:
            logger.error(f"Could not handle {event.type.value}: {e}")
            await self.event_bus.publish(
                Event(type=EventType.APPLICATION_ERROR, content=str(e))
            )

    async def publish_state(self) -> None:
        await self.event_bus.publish(
            Event(type=EventType.STATE_CHANGED, metadata={"state": self.state})
        )

    async def run(self) -> None:
        """Runs until a QUIT event arrives or the client is closed."""
        event_task = asyncio.create_task(self.event_bus.next_event())
        result_task = asyncio.create_task(self.client.next_result())
        try:
            while True:
                done, _ = await asyncio.wait(
                    {event_task, result_task}, return_when=asyncio.FIRST_COMPLETED
                )

                if result_task in done:
                    result = result_task.result()
                    if result is None:
                        logger.info("Generation client closed; stopping")
                        return
                    await self.handle_result(result)
                    result_task = asyncio.create_task(self.client.next_result())

                if event_task in done:
                    event = event_task.result()
                    if event.type == EventType.QUIT:
                        return
                    await self.handle_event(event)
                    event_task = asyncio.create_task(self.event_bus.next_event())

                await self.publish_state()
        finally:
            for task in (event_task, result_task):
                task.cancel()
            await asyncio.gather(event_task, result_task, return_exceptions=True)
