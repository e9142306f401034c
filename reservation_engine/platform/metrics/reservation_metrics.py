from contextlib import contextmanager
import time
from typing import Iterator

from prometheus_client import Counter, Histogram

from reservation_engine.platform.exception.exceptions import CustomBaseError


_RESULT_BY_STATUS = {400: 'invalid_state', 404: 'not_found', 409: 'conflict'}


class ReservationMetrics:
    """
    Reservation engine metrics collector

    Tracks lifecycle operations (create / confirm / release) by outcome and the
    expiry sweeper's throughput and failures.
    """

    def __init__(self):
        # ========== Lifecycle Metrics ==========
        self.reservation_requests = Counter(
            'reservation_requests_total',
            'Total reservation lifecycle requests',
            ['operation', 'result'],  # result: success/not_found/conflict/invalid_state/error
        )

        self.reservation_operation_duration = Histogram(
            'reservation_operation_duration_seconds',
            'Reservation lifecycle operation duration',
            ['operation'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
        )

        # ========== Expiry Sweeper Metrics ==========
        self.reservation_expired = Counter(
            'reservation_expired_total', 'Hold reservations deleted by the expiry sweeper'
        )

        self.reservation_sweep_failures = Counter(
            'reservation_sweep_failures_total', 'Expiry sweeper runs that raised'
        )

    # ========== Helper Methods ==========

    def record_operation(self, *, operation: str, result: str, duration: float) -> None:
        self.reservation_requests.labels(operation=operation, result=result).inc()
        self.reservation_operation_duration.labels(operation=operation).observe(duration)

    @contextmanager
    def track_operation(self, *, operation: str) -> Iterator[None]:
        start = time.perf_counter()
        result = 'success'
        try:
            yield
        except CustomBaseError as e:
            result = _RESULT_BY_STATUS.get(e.status_code, 'error')
            raise
        except Exception:
            result = 'error'
            raise
        finally:
            self.record_operation(
                operation=operation, result=result, duration=time.perf_counter() - start
            )

    def record_expired(self, *, count: int) -> None:
        if count:
            self.reservation_expired.inc(count)

    def record_sweep_failure(self) -> None:
        self.reservation_sweep_failures.inc()


# Global metrics instance
metrics = ReservationMetrics()
