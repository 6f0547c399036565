"""
Background Jobs

Periodic maintenance for the assignment engine (lease sweep).
"""

from review_dispatch.jobs.requeue_worker import RequeueScheduler

__all__ = ["RequeueScheduler"]
