"""
baseplate_deploy.observability.context

Pass-scoped logging context.

Responsibilities:
- Generate a run id for each provisioning pass.
- Bind run metadata into structlog contextvars for the duration of the pass.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


@contextmanager
def provisioning_context(*, stack: str, action: str, run_id: str | None = None) -> Iterator[str]:
    run_id = run_id or str(uuid.uuid4())
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(run_id=run_id, stack=stack, action=action)
    try:
        yield run_id
    finally:
        structlog.contextvars.clear_contextvars()


# --- Module Notes -----------------------------------------------------------
# Every log line emitted by registrants and clients during a pass carries the
# same run id, so one `up`/`destroy` can be followed end to end.
