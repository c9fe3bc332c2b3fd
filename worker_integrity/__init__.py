"""
Worker Integrity

Startup version-integrity guard for queue workers: refuses to run live
source, unidentified builds, or stale containers in production, and
publishes the running version of each worker role to Redis.
"""

__version__ = "1.0.0"
