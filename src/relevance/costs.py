"""
Token usage and cost accounting for model calls.

Costs are kept as an append-only list of CostData entries. The pure helpers
(add_usage, get_cost_summary) never mutate their input; CostTracker wraps
them with a lock so that concurrent generator threads can report usage into
one run.
"""

import threading
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.logging import get_logger
from relevance.llm import get_model_pricing
from relevance.models import TokenUsage

logger = get_logger(__name__)


class CostData(BaseModel):
    """Usage and computed cost of a single model call."""
    model_name: str
    usage: TokenUsage
    cost: float


class ModelCost(BaseModel):
    cost: float = 0.0
    usage: TokenUsage = Field(default_factory=TokenUsage)


class CostSummary(BaseModel):
    """Aggregated costs for a run."""
    total_cost: float = 0.0
    total_usage: TokenUsage = Field(default_factory=TokenUsage)
    costs_by_model: Dict[str, ModelCost] = Field(default_factory=dict)


def calculate_cost(model_name: str, usage: TokenUsage) -> float:
    """
    Price a call in USD.

    Unknown models are logged and priced at zero rather than failing the run.
    """
    pricing = get_model_pricing(model_name)

    if pricing is None:
        logger.warning("Unknown model pricing, cost not counted", model=model_name)
        return 0.0

    input_cost = (usage.input_tokens / 1_000_000) * pricing.input_token_cost
    output_cost = (usage.output_tokens / 1_000_000) * pricing.output_token_cost
    return input_cost + output_cost


def add_usage(costs: List[CostData], model_name: str, usage: TokenUsage) -> List[CostData]:
    """Return a new list with a priced entry for this usage appended."""
    cost = calculate_cost(model_name, usage)
    return [*costs, CostData(model_name=model_name, usage=usage, cost=cost)]


def get_cost_summary(costs: List[CostData]) -> CostSummary:
    """Total cost, total usage, and per-model breakdown for a list of entries."""
    total_usage = TokenUsage()
    by_model: Dict[str, ModelCost] = {}

    for entry in costs:
        total_usage = total_usage + entry.usage

        bucket = by_model.setdefault(entry.model_name, ModelCost())
        bucket.cost += entry.cost
        bucket.usage = bucket.usage + entry.usage

    return CostSummary(
        total_cost=sum(entry.cost for entry in costs),
        total_usage=total_usage,
        costs_by_model=by_model,
    )


class CostTracker:
    """
    Thread-safe accumulator of model usage for one CLI run or one request.

    Usage:
        tracker = CostTracker()
        tracker.add("claude-3-5-haiku-latest", TokenUsage(input_tokens=1200, output_tokens=300, total_tokens=1500))
        tracker.summary().total_cost
    """

    def __init__(self, costs: Optional[List[CostData]] = None):
        self._costs: List[CostData] = list(costs or [])
        self._lock = threading.Lock()

    def add(self, model_name: str, usage: TokenUsage) -> None:
        with self._lock:
            self._costs = add_usage(self._costs, model_name, usage)

    @property
    def costs(self) -> List[CostData]:
        with self._lock:
            return list(self._costs)

    def summary(self) -> CostSummary:
        return get_cost_summary(self.costs)
