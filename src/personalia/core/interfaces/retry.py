from typing import Protocol, Any, Awaitable, Callable

class RetryPort(Protocol):
    """Retry policy for idempotent API reads.

    The client only hands over callables that are safe to repeat (GET requests);
    submissions never go through this port. Keeps the core decoupled from tenacity.
    """
    async def execute(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:  # pragma: no cover - protocol
        """Run ``func`` until it succeeds, a non-retryable error escapes, or attempts run out.

        Supported kw overrides (optional): attempts, wait_initial, wait_max, exception_types.
        The last exception is re-raised unchanged after the final attempt.
        """
        ...
