# topmark:header:start
#
#   project      : SourceMark
#   file         : __init__.py
#   file_relpath : src/sourcemark/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SourceMark CLI subcommands."""
