"""Bounded-concurrency execution of many independent runs."""

import asyncio
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from leadrecon.core.logging import LogComponent, get_logger
from leadrecon.core.graph.engine import CompiledGraph
from leadrecon.core.graph.state import NodeState

logger = get_logger(LogComponent.BATCH)


class BatchResult(BaseModel):
    """Outcome of one run inside a batch."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    event_id: Optional[str] = None
    success: bool
    state: Optional[NodeState] = None
    error: Optional[str] = None


async def run_batch(
    graph: CompiledGraph,
    packets: Iterable[Any],
    max_concurrency: Optional[int] = None,
) -> List[BatchResult]:
    """Invoke ``graph`` once per packet with at most ``max_concurrency`` in flight.

    Runs share nothing: each owns its NodeState. A run that fails hard is
    reported as an unsuccessful BatchResult and never cancels the others.

    Returns:
        One BatchResult per packet, in input order
    """
    packets = list(packets)
    limit = max_concurrency or graph.config.max_concurrent_runs
    if limit < 1:
        raise ValueError("max_concurrency must be at least 1")
    semaphore = asyncio.Semaphore(limit)

    logger.info(f"Processing batch of {len(packets)} events (max {limit} in flight)")

    async def one(packet: Any) -> BatchResult:
        state = packet if isinstance(packet, NodeState) else NodeState.initial(packet)
        event_id = _event_id(state.packet)
        async with semaphore:
            try:
                final = await graph.invoke(state, run_id=event_id)
            except Exception as e:
                logger.error(f"Run for event {event_id} failed: {e}")
                return BatchResult(event_id=event_id, success=False, error=str(e))
        return BatchResult(event_id=event_id, success=True, state=final)

    return list(await asyncio.gather(*(one(packet) for packet in packets)))


def _event_id(packet: Any) -> Optional[str]:
    if isinstance(packet, dict):
        return packet.get("eventId") or packet.get("event_id")
    return getattr(packet, "event_id", None)
