# topmark:header:start
#
#   project      : SourceMark
#   file         : __init__.py
#   file_relpath : src/sourcemark/pipeline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Annotation pipeline: gatekeeper, scanner state machine and tag injector.

The public surface is `sourcemark.pipeline.engine.process` (text in, text out)
and `sourcemark.pipeline.engine.annotate` (text in, `ScanReport` out).
"""

from __future__ import annotations

from sourcemark.pipeline.engine import annotate, process
from sourcemark.pipeline.outcomes import ScanReport, TagOutcome

__all__ = ["ScanReport", "TagOutcome", "annotate", "process"]
