"""
Worker module.
Contains the guarded worker entry point.
"""

from worker_integrity.worker.main import Worker, run

__all__ = ["Worker", "run"]
