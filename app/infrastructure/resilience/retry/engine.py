"""Retry engine.

Runs an operation with bounded attempts and optional exponential backoff.
Failures the retry condition rejects stop the loop early. The last failure
is always classified through the ``ErrorClassifier`` and raised as an
``AppError`` chained to the original exception.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence, TypeVar, TYPE_CHECKING

from infrastructure.errors import AppError, ErrorClassifier
from infrastructure.logging import get_module_logger
from infrastructure.notifications import NotificationCenter
from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.models import RetryInfo, RetryState, RetryStats

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

T = TypeVar("T")

Sleeper = Callable[[float], None]


class RetryNotAllowedError(RuntimeError):
    """Raised by ``RetryEngine.retry`` when the last call cannot be retried."""


class RetryEngine:
    """Executes operations with retries.

    Args:
        classifier: Funnel for the final failure of every call.
        notifications: Receives the "succeeded after retry" notice.
        default_config: Policy used when ``execute`` gets no config.
        sleep: Replacement for the backoff wait (tests pass a recorder).
        batch_concurrency: Default chunk size for :meth:`execute_batch`.

    Example:
        engine = RetryEngine(classifier, notifications)
        content = engine.execute(
            lambda: store.get_file_content("site.json"),
            RetryConfig.network(),
        )
    """

    def __init__(
        self,
        classifier: ErrorClassifier,
        notifications: Optional[NotificationCenter] = None,
        default_config: Optional[RetryConfig] = None,
        sleep: Optional[Sleeper] = None,
        batch_concurrency: int = 3,
    ):
        self.classifier = classifier
        self.notifications = notifications
        self.default_config = default_config or RetryConfig()
        self.batch_concurrency = batch_concurrency
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_state: Optional[RetryState] = None
        self._last_config: Optional[RetryConfig] = None
        self._stats = RetryStats()
        self.log = logger.bind(component="retry_engine")

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        classifier: ErrorClassifier,
        notifications: Optional[NotificationCenter] = None,
        sleep: Optional[Sleeper] = None,
    ) -> "RetryEngine":
        return cls(
            classifier,
            notifications=notifications,
            default_config=RetryConfig.from_settings(settings),
            sleep=sleep,
            batch_concurrency=settings.retry.batch_concurrency,
        )

    def execute(
        self,
        operation: Callable[[], T],
        config: Optional[RetryConfig] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> T:
        """Run ``operation`` until it succeeds or the policy gives up.

        Args:
            operation: Zero-argument callable.
            config: Retry policy; defaults to the engine's default config.
            cancel_event: When set during a backoff wait, the wait ends and
                the last failure is raised without further attempts.

        Returns:
            The operation's result.

        Raises:
            AppError: Classified last failure, chained to the raw exception.
        """
        config = config or self.default_config
        state = RetryState()

        for attempt in range(1, config.max_attempts + 1):
            state.attempt = attempt
            state.total_attempts += 1
            try:
                result = operation()
            except Exception as exc:
                state.last_error = exc
                state.failure_count += 1

                if attempt >= config.max_attempts:
                    break
                if not config.retry_condition(exc):
                    self.log.info(
                        "retry_condition_rejected",
                        attempt=attempt,
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                    break

                delay = config.delay_for(attempt)
                self._invoke("on_retry", config.on_retry, attempt, exc)
                self.log.warning(
                    "retry_attempt_failed",
                    attempt=attempt,
                    next_attempt=attempt + 1,
                    delay_seconds=delay,
                    error=str(exc),
                )
                if self._wait(delay, cancel_event):
                    state.cancelled = True
                    self.log.info("retry_cancelled", attempt=attempt)
                    break
                continue

            state.success_count += 1
            self._complete(state, config)
            self._invoke("on_success", config.on_success, result, attempt)
            if attempt > 1:
                self.log.info("retry_succeeded", attempts=attempt)
                if config.notify and self.notifications is not None:
                    self.notifications.success(
                        "Operation succeeded",
                        f"Completed after {attempt} attempts",
                    )
            return result

        self._complete(state, config)
        last_error = state.last_error
        self._invoke("on_failure", config.on_failure, last_error, state.total_attempts)

        context = f"Retry failed after {state.total_attempts} attempts"
        if config.context:
            context = f"{config.context}: {context}"
        app_error = self.classifier.handle(
            last_error, context=context, notify=config.notify
        )
        if app_error is last_error:
            raise app_error
        raise app_error from last_error

    def retry(
        self, operation: Callable[[], T], config: Optional[RetryConfig] = None
    ) -> T:
        """Run ``operation`` again if the last call left attempts to spend.

        Raises:
            RetryNotAllowedError: No previous failure, attempts exhausted or
                the last failure is not retryable.
        """
        if not self.can_retry:
            raise RetryNotAllowedError(
                "Cannot retry: no previous error or max attempts reached"
            )
        return self.execute(operation, config or self._last_config)

    def wrap(
        self, operation: Callable[[], T], config: Optional[RetryConfig] = None
    ) -> Callable[[], T]:
        """Return a zero-argument callable running ``operation`` through the engine."""

        def call() -> T:
            return self.execute(operation, config)

        return call

    def execute_batch(
        self,
        operations: Sequence[Callable[[], Any]],
        concurrency: Optional[int] = None,
        fail_fast: bool = False,
        retry_individual: bool = True,
        config: Optional[RetryConfig] = None,
    ) -> List[Any]:
        """Run operations in chunks of ``concurrency`` parallel calls.

        Chunks run one after another; the operations inside a chunk run in
        parallel and the chunk is joined before the next one starts.

        Args:
            operations: Zero-argument callables.
            concurrency: Chunk size; defaults to the engine's batch concurrency.
            fail_fast: Raise the first failure of the first failing chunk
                instead of continuing.
            retry_individual: Wrap each operation in its own ``execute``.
            config: Policy for individual retries.

        Returns:
            Results in input order; a failed operation's slot holds its AppError.

        Raises:
            AppError: With ``fail_fast``, the first failure encountered.
        """
        concurrency = concurrency or self.batch_concurrency
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")

        def run(operation: Callable[[], Any]) -> Any:
            if retry_individual:
                return self.execute(operation, config)
            try:
                return operation()
            except AppError:
                raise
            except Exception as exc:
                raise self.classifier.handle(
                    exc, context="Batch operation failed", notify=False
                ) from exc

        results: List[Any] = []
        with ThreadPoolExecutor(max_workers=concurrency) as pool:
            for start in range(0, len(operations), concurrency):
                chunk = operations[start : start + concurrency]
                futures = [pool.submit(run, operation) for operation in chunk]

                chunk_results: List[Any] = []
                first_error: Optional[AppError] = None
                for future in futures:
                    try:
                        chunk_results.append(future.result())
                    except AppError as error:
                        chunk_results.append(error)
                        first_error = first_error or error

                if first_error is not None and fail_fast:
                    self.log.warning(
                        "batch_aborted",
                        chunk_start=start,
                        completed=len(results),
                        total=len(operations),
                    )
                    raise first_error
                results.extend(chunk_results)

        return results

    def _wait(self, delay: float, cancel_event: Optional[threading.Event]) -> bool:
        # Returns True when the wait was cancelled
        if cancel_event is not None:
            if self._sleep is None:
                return cancel_event.wait(delay)
            self._sleep(delay)
            return cancel_event.is_set()
        (self._sleep or time.sleep)(delay)
        return False

    def _invoke(self, name: str, callback: Optional[Callable], *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            self.log.error("retry_callback_failed", callback=name, error=str(e))

    def _complete(self, state: RetryState, config: RetryConfig) -> None:
        with self._lock:
            self._last_state = state
            self._last_config = config
            self._stats.record(state)

    @property
    def last_state(self) -> Optional[RetryState]:
        with self._lock:
            return self._last_state

    @property
    def can_retry(self) -> bool:
        """True if the last call failed with attempts left and a retryable error."""
        with self._lock:
            state, config = self._last_state, self._last_config
        if state is None or config is None or state.last_error is None:
            return False
        if state.succeeded or state.attempt >= config.max_attempts:
            return False
        return bool(config.retry_condition(state.last_error))

    @property
    def retry_info(self) -> RetryInfo:
        """Attempts left, next delay and progress of the last completed call."""
        with self._lock:
            state, config = self._last_state, self._last_config
        config = config or self.default_config
        attempt = state.attempt if state is not None else 0
        return RetryInfo(
            attempts_left=config.max_attempts - attempt,
            next_delay=config.delay_for(max(attempt, 1)),
            progress=attempt / config.max_attempts,
        )

    def stats(self) -> dict:
        """Cumulative attempt counters and success rate."""
        with self._lock:
            return self._stats.to_dict()

    def reset(self) -> None:
        """Forget the last call and zero the cumulative counters."""
        with self._lock:
            self._last_state = None
            self._last_config = None
            self._stats = RetryStats()
