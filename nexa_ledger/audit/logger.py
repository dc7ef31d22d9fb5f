"""
Audit Logger

DESIGN DECISION: Every committed ledger transition and every persistence
event is logged. This provides:
1. Traceability of how balances were reached
2. Debugging capability when a snapshot is corrupted or unwritable
3. A record of tolerated dangling references

The audit logger:
- Is synchronous, like the ledger itself
- Gracefully handles failures (a failing sink never breaks a transition)
"""

import logging
from typing import Callable, Optional

import structlog

from nexa_ledger.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


PACKAGE_LOGGER = "nexa_ledger"


def configure_logging(debug_mode: bool = False) -> None:
    """
    Set the level of every nexa_ledger logger.

    Debug mode lets debug-severity audit events (snapshot_saved) through.
    """
    level = logging.DEBUG if debug_mode else logging.INFO
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


AuditSink = Callable[[AuditEvent], None]


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional sink (for persistence or inspection)
    """

    def __init__(
        self,
        sink: Optional[AuditSink] = None,
        environment: Optional[str] = None,
    ):
        """
        Initialize audit logger.

        Args:
            sink: Callable receiving every event.
                  If None, only logs locally.
            environment: Bound to every log line when given.
        """
        self._sink = sink
        self._logger = structlog.get_logger("nexa_ledger.audit")
        if environment:
            self._logger = self._logger.bind(environment=environment)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Hands the event to the sink if available.

        Returns True if the sink accepted the event (or no sink configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink:
            try:
                self._sink(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True
