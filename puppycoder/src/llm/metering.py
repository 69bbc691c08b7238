# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Process-wide token and cost accounting across every project."""

from typing import DefaultDict
from collections import defaultdict

from ..config import settings
from ..types.llm_types import TokenUsage, Model

# Token usage per model, accumulated over the process lifetime
token_meter: DefaultDict[Model, TokenUsage] = defaultdict(TokenUsage)


def record_usage(model: Model, usage: TokenUsage) -> None:
    token_meter[model] += usage


def get_cost_by_model() -> dict[Model, float]:
    """Dollar cost of every model used so far, at the configured prices."""
    costs = {}
    for model, usage in token_meter.items():
        input_cost, output_cost = usage.calculate_cost(settings.token_cost(model))
        costs[model] = input_cost + output_cost
    return costs


def get_total_cost() -> float:
    return sum(get_cost_by_model().values())


def get_total_usage() -> TokenUsage:
    return sum(token_meter.values(), TokenUsage())


def usage_report() -> str:
    """One line per model used, followed by the totals."""
    costs = get_cost_by_model()
    lines = [
        f"{model.id}: {usage.prompt_tokens} in / {usage.completion_tokens} out, ${costs[model]:.4f}"
        for model, usage in token_meter.items()
        if usage.total_tokens
    ]
    lines.append(
        f"Total: {get_total_usage().total_tokens} tokens over "
        f"{llm_call_counter.get_count()} requests, ${get_total_cost():.4f}"
    )
    return "\n".join(lines)


class CallCounter:
    """Counts generation requests submitted since start-up."""

    def __init__(self):
        self.count = 0

    def count_new_call(self):
        self.count += 1

    def get_count(self) -> int:
        return self.count


llm_call_counter = CallCounter()
