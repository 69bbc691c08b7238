# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""LLM integration: generation requests, results, providers and the client."""

import logging

from .base import (
    GenRequest,
    GenResult,
    GenSuccess,
    GenError,
    Completion,
    TimingInfo,
)
from .client import GenerationClient
from .metering import token_meter, get_total_cost, get_total_usage, usage_report

# Quieten LLM API call logs to make stdout more useful
logging.getLogger("httpx").setLevel(logging.WARNING)

__all__ = [
    "GenRequest",
    "GenResult",
    "GenSuccess",
    "GenError",
    "Completion",
    "TimingInfo",
    "GenerationClient",
    "token_meter",
    "get_total_cost",
    "get_total_usage",
    "usage_report",
]
