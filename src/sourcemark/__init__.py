# topmark:header:start
#
#   project      : SourceMark
#   file         : __init__.py
#   file_relpath : src/sourcemark/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SourceMark package.

SourceMark is a development-time template preprocessor. It walks template
source text and tags each HTML start tag with a debug attribute recording the
originating template file and line, so browser tooling can jump from a
rendered element back to its source.
"""

from __future__ import annotations
