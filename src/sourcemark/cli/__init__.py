# topmark:header:start
#
#   project      : SourceMark
#   file         : __init__.py
#   file_relpath : src/sourcemark/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SourceMark command line interface (Click)."""
