# topmark:header:start
#
#   project      : SourceMark
#   file         : __main__.py
#   file_relpath : src/sourcemark/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running SourceMark via ``python -m sourcemark``.

Equivalent to the ``sourcemark`` console script; delegates to
:func:`sourcemark.cli.main.cli`.

Examples:
    Preview annotations for a template directory::

        python -m sourcemark annotate --env development templates/
"""

from __future__ import annotations

from sourcemark.cli.main import cli

if __name__ == "__main__":
    cli()
