"""Exception hierarchy for insomnia-sync.

All exceptions inherit from :class:`InsomniaSyncError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`insomnia_sync.exit_codes`. The top-level error handler in
:func:`insomnia_sync.app.main` catches ``InsomniaSyncError`` and exits with
the appropriate code, while unexpected exceptions are reported on stderr and exit
with :data:`EXIT_GENERIC_FAILURE`.

Failures of a single conversion run are :class:`ConversionError` instances
tagged with the pipeline ``stage`` that failed, so callers can report *where*
a conversion broke without inspecting the message.

Subclass hierarchy::

    InsomniaSyncError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- ConfigError             (exit 1)
    +-- ConversionError         (exit 1, stage)
        +-- SpecParseError      (exit 7, stage "parse")
        +-- SourceReadError     (exit 8, stage "read")
        |   +-- SourceNotFoundError (exit 4)
        +-- AssemblyError       (exit 1, stage "assemble")
        +-- SerializationError  (exit 1, stage "serialize")
        +-- OutputWriteError    (exit 8, stage "write")
"""

from insomnia_sync.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_IO_ERROR,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
)


class InsomniaSyncError(Exception):
    """Base exception for all insomnia-sync errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`insomnia_sync.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(InsomniaSyncError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(InsomniaSyncError):
    """Raised for configuration problems (invalid JSON, bad values in config files)."""

    exit_code = EXIT_GENERIC_FAILURE


class ConversionError(InsomniaSyncError):
    """Raised when one conversion run fails.

    The ``stage`` attribute names the pipeline step that failed: ``read``,
    ``parse``, ``assemble``, ``serialize`` or ``write``.
    """

    stage: str = "assemble"

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        exit_code: int | None = None,
    ):
        super().__init__(message, exit_code=exit_code)
        if stage is not None:
            self.stage = stage


class SpecParseError(ConversionError):
    """Raised when the source text is not well-formed JSON/YAML or not a mapping."""

    exit_code = EXIT_SPEC_PARSE_ERROR
    stage = "parse"


class SourceReadError(ConversionError):
    """Raised when the source document cannot be read (local file, URL, or stdin)."""

    exit_code = EXIT_IO_ERROR
    stage = "read"


class SourceNotFoundError(SourceReadError):
    """Raised when the source document does not exist."""

    exit_code = EXIT_NOT_FOUND


class AssemblyError(ConversionError):
    """Raised when the workspace cannot be assembled from the parsed document."""

    stage = "assemble"


class SerializationError(ConversionError):
    """Raised when the assembled workspace cannot be encoded as YAML."""

    stage = "serialize"


class OutputWriteError(ConversionError):
    """Raised when the generated workspace cannot be written to disk."""

    exit_code = EXIT_IO_ERROR
    stage = "write"
