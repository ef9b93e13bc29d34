"""
Test Suite for Bounded Pipeline.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: Pipeline runs with real worker threads
    - fixtures/: Test doubles and sample configuration

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
    pytest --cov=src/bounded_pipeline       # With coverage
"""
