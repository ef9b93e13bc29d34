"""
Integration Tests - Full Pipeline Runs.

Every test here starts real worker threads and waits with a timeout, so
a regression shows up as a failure instead of a hang.
"""
