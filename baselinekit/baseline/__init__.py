"""
Baseline resolution, synchronization and change reporting.

Usage:
    from baselinekit.baseline import SyncEngine, SyncOptions

    engine = SyncEngine.from_config()
    result = engine.ensure(options=SyncOptions(skip_fetch_if_unchanged=True))
"""

from baselinekit.model.baseline import SyncOptions

from .engine import SyncEngine
from .excerpt import Excerpt, read_baseline_excerpt, read_excerpt, resolve_document
from .report import ChangeReporter, format_report
from .resolver import SourceResolver

__all__ = [
    "ChangeReporter",
    "Excerpt",
    "SourceResolver",
    "SyncEngine",
    "SyncOptions",
    "format_report",
    "read_baseline_excerpt",
    "read_excerpt",
    "resolve_document",
]
