"""
notification_core — Multi-channel notification dispatch core.

Sub-packages:
    core/            — Cross-cutting concerns: settings, errors, logging
    notifications/   — Entity model, channel abstraction, registry, dispatcher

The package never performs network I/O on its own. Channels validate a
request, hand it to a pluggable transport (a logging-only simulation by
default) and wrap the outcome into a tri-state Result.
"""

import logging

# Library logging stays silent until the host application configures it.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
