# core/state_manager.py

from typing import Any, Dict, Optional

IDLE = "idle"
LOADING = "loading"
SUCCESS = "success"
FAILURE = "failure"


class RefreshState:
    """
    Observable status of a price refresh cycle:
      idle -> loading -> success | failure
    A retry re-enters loading from any settled state. Only one cycle may be loading.
    """

    def __init__(self):
        self.status = IDLE
        self.message: Optional[str] = None
        self.cycles = 0

    def begin(self) -> bool:
        """Enter loading. Returns False (and changes nothing) if a cycle is already in flight."""
        if self.status == LOADING:
            return False
        self.status = LOADING
        self.message = None
        self.cycles += 1
        return True

    def succeed(self):
        """Settle the current cycle as a success"""
        if self.status == LOADING:
            self.status = SUCCESS
            self.message = None

    def fail(self, message: str):
        """Settle the current cycle as a failure with a human readable reason"""
        if self.status == LOADING:
            self.status = FAILURE
            self.message = message

    def reset(self):
        self.status = IDLE
        self.message = None

    def snapshot(self) -> Dict[str, Any]:
        return {"status": self.status, "message": self.message, "cycles": self.cycles}
