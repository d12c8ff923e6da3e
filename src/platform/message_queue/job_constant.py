class JobQueues:
    """Queue names; the Redis key is built by job_queue.queue_key()"""

    EMAIL = 'email'  # notification mails (placeholder processing)
    PNR_SYNC = 'pnr_sync'  # reservation system sync (placeholder processing)

    @staticmethod
    def all() -> list[str]:
        return [JobQueues.EMAIL, JobQueues.PNR_SYNC]


class JobTypes:
    HOLD_CONFIRMED = 'hold_confirmed'
    GROUP_CANCELLED = 'group_cancelled'
