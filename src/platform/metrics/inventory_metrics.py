from prometheus_client import Counter, Histogram


class InventoryMetrics:
    """Seat inventory, lifecycle and job queue metrics exposed on /metrics."""

    def __init__(self) -> None:
        # ========== Seat Ledger Metrics ==========
        self.hold_requests = Counter(
            'seat_hold_requests_total',
            'Seat hold requests',
            ['pax_type', 'result'],  # result: held/capacity_exceeded/not_on_sale/lock_timeout
        )

        self.hold_duration = Histogram(
            'seat_hold_duration_seconds',
            'Time spent reserving seats including lock waits',
            ['pax_type'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
        )

        self.seats_confirmed = Counter(
            'seats_confirmed_total', 'Seats moved from on hold to issued', ['pax_type']
        )

        self.seats_released = Counter(
            'seats_released_total',
            'Seats returned to the available pool',
            ['reason'],  # released/expired/cancelled
        )

        # ========== Lifecycle Metrics ==========
        self.group_transitions = Counter(
            'flight_group_transitions_total',
            'Flight group status transitions',
            ['from_status', 'to_status'],
        )

        # ========== Job Queue Metrics ==========
        self.jobs_published = Counter(
            'jobs_published_total', 'Jobs pushed to a queue', ['queue', 'result']
        )

        self.jobs_processed = Counter(
            'jobs_processed_total', 'Jobs handled by workers', ['queue', 'result']
        )

    def record_hold(self, *, pax_type: str, result: str, duration: float) -> None:
        self.hold_requests.labels(pax_type=pax_type, result=result).inc()
        self.hold_duration.labels(pax_type=pax_type).observe(duration)

    def record_confirm(self, *, pax_type: str, quantity: int) -> None:
        self.seats_confirmed.labels(pax_type=pax_type).inc(quantity)

    def record_release(self, *, reason: str, quantity: int) -> None:
        if quantity > 0:
            self.seats_released.labels(reason=reason).inc(quantity)

    def record_transition(self, *, from_status: str, to_status: str) -> None:
        self.group_transitions.labels(from_status=from_status, to_status=to_status).inc()

    def record_job_published(self, *, queue: str, result: str) -> None:
        self.jobs_published.labels(queue=queue, result=result).inc()

    def record_job_processed(self, *, queue: str, result: str) -> None:
        self.jobs_processed.labels(queue=queue, result=result).inc()


metrics = InventoryMetrics()
