"""
Unit Tests - Testing Individual Components in Isolation.

Test Files:
    - test_bounded_channel.py: Watermarks, hysteresis, pause, end-of-stream
    - test_stages.py: Map/filter/expand and record stages
    - test_adapters.py: Reference sources, sinks, logger, metrics
    - test_config_loader.py: Configuration loading/validation
    - test_stage_registry.py: Named stage factories
    - test_error_handler.py: Retry with backoff
"""
