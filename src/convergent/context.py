"""Runtime execution context for applying resources."""

from __future__ import annotations

import threading
from typing import Any


class Context[P]:
    """Runtime state passed to every resource operation.

    The EC2 client is injected here rather than looked up globally, and
    ``cancel`` lets the caller interrupt any convergence wait in progress.
    """

    def __init__(
        self,
        target: P,
        *,
        client: Any = None,
        dry_run: bool = False,
        cancel: threading.Event | None = None,
    ) -> None:
        self.target = target
        self.client = client
        self.dry_run = dry_run
        self.cancel = cancel if cancel is not None else threading.Event()
