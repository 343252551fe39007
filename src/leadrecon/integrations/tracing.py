"""Workflow tracing."""

from typing import Any, Dict, List, Optional

from leadrecon.core.logging import LogComponent, get_logger, log_verbose

logger = get_logger(LogComponent.INTEGRATIONS)


class LoggingTracer:
    """Writes workflow start/completion traces to the integrations logger.

    Attributes:
        records: Every trace logged, newest last
    """

    def __init__(self):
        self.records: List[Dict[str, Any]] = []

    async def log_workflow(
        self,
        event_id: str,
        name: str,
        outputs: Dict[str, Any],
        duration_ms: int = 0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        record = {
            "event_id": event_id,
            "name": name,
            "outputs": outputs,
            "duration_ms": duration_ms,
            "metadata": metadata or {},
        }
        self.records.append(record)
        logger.info(f"[{event_id}] {name} ({duration_ms}ms)")
        log_verbose(logger, f"[{event_id}] {name} outputs={outputs} metadata={record['metadata']}")
