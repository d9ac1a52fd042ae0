"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~insomnia_sync.exceptions.InsomniaSyncError` subclass.
Shell wrappers and CI jobs can inspect the exit code to tell a broken spec
apart from a missing file without parsing stderr.

Example::

    $ insomnia-sync convert missing.yml
    $ echo $?
    4   # EXIT_NOT_FOUND -- the source document does not exist
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""The source document does not exist."""

EXIT_SPEC_PARSE_ERROR = 7
"""The source document is not well-formed JSON/YAML."""

EXIT_IO_ERROR = 8
"""The source could not be read or the output could not be written."""
