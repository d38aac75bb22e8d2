"""
Core package — cross-cutting concerns.

Modules:
    config          — global notification settings (advisory policy values)
    errors          — exception hierarchy & error categories
    logging_config  — structured JSON / pretty logging
"""
