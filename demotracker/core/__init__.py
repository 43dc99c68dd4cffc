"""
Core utilities shared across the demo tracker.

Configuration, logging setup and small helpers live here so that
repositories/services/routers do not read os.environ or configure logging
on their own.
"""
