"""Poll registered source documents and regenerate workspaces on change.

:class:`SpecWatcher` keeps a registry of ``source -> output`` pairs and, per
source, the last modification time it has seen. An entry without a recorded
time is *unobserved*; the first tick that can stat it records the time and
treats it as changed, so every registered file is converted once on startup.
After that, only a strictly newer ``st_mtime_ns`` triggers a regeneration.

The loop is single-threaded and cooperative: each tick converts changed
entries one after another in registration order, then sleeps for the polling
interval. Failures are logged per entry and never stop the loop or drop the
registration, so fixing a broken spec is picked up on the next save.
Registering files while :meth:`SpecWatcher.start` is running from another
thread is not synchronised.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional

from insomnia_sync.exceptions import ConversionError, SourceNotFoundError
from insomnia_sync.generator import convert_file

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = "-insomnia"
DEFAULT_EXTENSION = ".yml"


def derive_output_path(
    source: str | Path,
    suffix: str = DEFAULT_SUFFIX,
    extension: str = DEFAULT_EXTENSION,
    directory: Optional[str | Path] = None,
) -> Path:
    """Return the default workspace path for *source*.

    ``api/users.yaml`` becomes ``api/users-insomnia.yml``. Pass *directory* to
    place the file elsewhere (the ``convert`` command uses the working
    directory).
    """
    source_path = Path(source)
    parent = Path(directory) if directory is not None else source_path.parent
    return parent / f"{source_path.stem}{suffix}{extension}"


class SpecWatcher:
    """Regenerate Insomnia workspaces whenever their source document changes.

    Args:
        interval: Seconds to sleep between ticks.
        converter: Callable ``(source, output)`` that performs one
            conversion. Defaults to
            :func:`~insomnia_sync.generator.workspace.convert_file`.
        sleep: Sleep function, injectable for tests.
        suffix: Tag appended to the source stem for derived output paths.
        extension: Extension of derived output paths.

    Example::

        watcher = SpecWatcher(interval=2.0)
        watcher.add_file("openapi.yml")
        watcher.start()  # runs until the process is interrupted
    """

    def __init__(
        self,
        interval: float = 2.0,
        converter: Optional[Callable[[Path, Path], Any]] = None,
        sleep: Callable[[float], None] = time.sleep,
        suffix: str = DEFAULT_SUFFIX,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self.interval = interval
        self.suffix = suffix
        self.extension = extension
        self._converter = converter or convert_file
        self._sleep = sleep
        self._outputs: dict[Path, Path] = {}
        self._last_modified: dict[Path, int] = {}

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def add_file(self, source: str | Path, output: Optional[str | Path] = None) -> Path:
        """Register *source* for watching.

        The entry starts unobserved, so the next tick converts it.

        Args:
            source: The OpenAPI/Swagger document to watch.
            output: Where to write the workspace. Derived from *source* when
                omitted.

        Returns:
            The output path registered for *source*.

        Raises:
            SourceNotFoundError: If *source* does not exist.
        """
        source_path = Path(source)
        if not source_path.is_file():
            raise SourceNotFoundError(f"OpenAPI file does not exist: {source_path}")

        output_path = (
            Path(output)
            if output
            else derive_output_path(source_path, self.suffix, self.extension)
        )
        self._outputs[source_path] = output_path
        self._last_modified.pop(source_path, None)
        logger.info("Added file to watch: %s -> %s", source_path, output_path)
        return output_path

    def remove_file(self, source: str | Path) -> bool:
        """Stop watching *source*. Returns ``False`` if it was not registered."""
        source_path = Path(source)
        if source_path not in self._outputs:
            return False
        del self._outputs[source_path]
        self._last_modified.pop(source_path, None)
        logger.info("Removed file from watch: %s", source_path)
        return True

    def watched_files(self) -> dict[Path, Path]:
        """Return a copy of the ``source -> output`` registry."""
        return dict(self._outputs)

    def last_modified(self, source: str | Path) -> Optional[int]:
        """Return the recorded ``st_mtime_ns`` of *source*, or ``None`` if unobserved."""
        return self._last_modified.get(Path(source))

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def check_for_changes(self) -> list[Any]:
        """Run one tick over every registered entry.

        Returns:
            The converter results of the entries regenerated successfully
            during this tick.
        """
        results: list[Any] = []
        for source, output in list(self._outputs.items()):
            if not self._has_changed(source):
                continue

            logger.info("Detected change in: %s", source)
            try:
                result = self._converter(source, output)
            except ConversionError as exc:
                logger.error(
                    "Error regenerating %s (%s stage): %s", output, exc.stage, exc
                )
                continue
            except Exception:
                logger.exception("Unexpected error regenerating %s", output)
                continue

            logger.info("Successfully regenerated: %s", output)
            results.append(result)
        return results

    def _has_changed(self, source: Path) -> bool:
        """Update the recorded mtime of *source* and report whether it changed."""
        try:
            mtime = source.stat().st_mtime_ns
        except OSError as exc:
            logger.warning("Error checking file status for %s: %s", source, exc)
            return False

        last = self._last_modified.get(source)
        if last is None or mtime > last:
            self._last_modified[source] = mtime
            return True
        return False

    def start(self, max_ticks: Optional[int] = None) -> None:
        """Poll until the hosting process stops, or for *max_ticks* ticks.

        There is no internal cancellation: the CLI ends the loop by
        interrupting the process, which takes effect at the latest at the
        next sleep.
        """
        logger.info(
            "Starting file watcher with %s second polling interval (%d files)",
            self.interval,
            len(self._outputs),
        )
        ticks = 0
        while True:
            self.check_for_changes()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                return
            self._sleep(self.interval)
