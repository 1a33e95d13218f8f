"""
Per-domain loading and error flags for the events, bets and balance domains.

These flags are transient: they are never persisted.
"""

from contextlib import contextmanager

from betting_ledger.models import ErrorState, LoadingState

DOMAINS = ("events", "bets", "balance")


def _check_domain(domain: str) -> str:
    if domain not in DOMAINS:
        raise ValueError(f"Unknown status domain: {domain!r} (expected one of {', '.join(DOMAINS)})")
    return domain


class StatusTracker:
    """Independent loading flag and error message per domain."""

    def __init__(self):
        self.loading = LoadingState()
        self.error = ErrorState()

    def set_loading(self, domain: str, value: bool) -> LoadingState:
        setattr(self.loading, _check_domain(domain), bool(value))
        return self.loading.model_copy()

    def set_error(self, domain: str, message: str | None) -> ErrorState:
        setattr(self.error, _check_domain(domain), message)
        return self.error.model_copy()

    def clear_errors(self) -> ErrorState:
        self.error = ErrorState()
        return self.error.model_copy()

    def reset(self):
        self.loading = LoadingState()
        self.error = ErrorState()

    @property
    def is_loading(self) -> bool:
        return any(self.loading.model_dump().values())

    @property
    def has_errors(self) -> bool:
        return any(v is not None for v in self.error.model_dump().values())

    @contextmanager
    def track(self, domain: str):
        """
        Mark a domain as loading for the duration of the block.

        The domain's error is cleared on entry. If the block raises, the
        exception message is recorded as the domain's error and the
        exception propagates. Loading is always cleared on exit.
        """
        self.set_loading(domain, True)
        self.set_error(domain, None)
        try:
            yield
        except Exception as e:
            self.set_error(domain, str(e))
            raise
        finally:
            self.set_loading(domain, False)
