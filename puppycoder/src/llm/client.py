# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The asynchronous generation client.

Each submitted request runs as its own asyncio task and delivers exactly one
result onto a shared queue. Results arrive in completion order, not submission
order; callers correlate them by request_id.
"""

import asyncio
import logging

from .base import GenRequest, GenResult, GenSuccess, GenError
from .metering import record_usage, llm_call_counter
from .providers.base_provider import BaseProvider
from ..config import settings
from ..types.llm_types import NetworkError, BackendError, GenerationError

logger = logging.getLogger(__name__)


class GenerationClient:

    def __init__(self, provider: BaseProvider, timeout: float | None = None):
        self.provider = provider
        self.timeout = timeout if timeout is not None else settings.GENERATION_TIMEOUT
        self._results: asyncio.Queue[GenResult | None] = asyncio.Queue()
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def submit(self, request: GenRequest) -> None:
        if self._closed:
            raise RuntimeError("cannot submit to a closed GenerationClient")

        llm_call_counter.count_new_call()
        task = asyncio.create_task(self._generate(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def next_result(self) -> GenResult | None:
        """Waits for the next completed request.

        Returns None once the client has been closed and every delivered
        result has been consumed.
        """
        result = await self._results.get()
        if result is None:
            # Leave the sentinel in place for any later reader
            self._results.put_nowait(None)
        return result

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._results.put_nowait(None)

    async def _generate(self, request: GenRequest) -> None:
        self._results.put_nowait(await self._run_request(request))

    async def _run_request(self, request: GenRequest) -> GenResult:
        try:
            async with asyncio.timeout(self.timeout):
                completion = await self.provider.create_completion(request)
        except TimeoutError:
            logger.warning(f"Request {request.request_id} timed out after {self.timeout}s")
            return GenError(
                kind="timeout",
                request_id=request.request_id,
                description=f"no response within {self.timeout} seconds",
            )
        except BackendError as e:
            logger.error(f"Backend error for request {request.request_id}: {e}")
            return GenError(
                kind="backend",
                request_id=request.request_id,
                description=str(e),
                status_code=e.status_code,
            )
        except (NetworkError, GenerationError) as e:
            logger.error(f"Network error for request {request.request_id}: {e}")
            return GenError(
                kind="network", request_id=request.request_id, description=str(e)
            )
        except Exception as e:
            logger.exception(f"Unexpected error for request {request.request_id}")
            return GenError(
                kind="backend", request_id=request.request_id, description=str(e)
            )

        record_usage(request.model, completion.usage)
        input_cost, output_cost = completion.usage.calculate_cost(
            settings.token_cost(request.model)
        )
        return GenSuccess(
            request_id=request.request_id,
            message=completion.message,
            usage=completion.usage,
            input_cost=input_cost,
            output_cost=output_cost,
            timing=completion.timing,
        )
