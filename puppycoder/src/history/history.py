# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The per-project conversation log.

History is append-only: items are frozen once appended and are never
reordered or removed, so the context handed to the model is always the full
conversation in the order it happened.
"""

from typing import Iterator
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field

from ..types.llm_types import Message


class HistoryItem(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    message: Message

    model_config = ConfigDict(frozen=True)


class History(BaseModel):
    items: list[HistoryItem] = Field(default_factory=list)

    def append(self, message: Message) -> HistoryItem:
        item = HistoryItem(message=message)
        self.items.append(item)
        return item

    def context(self) -> Iterator[Message]:
        """Yields every message in append order, without timestamps.

        Each call returns a fresh iterator.
        """
        return (item.message for item in self.items)

    def __len__(self) -> int:
        return len(self.items)
