"""Change detection -- keep generated workspaces in sync with their sources.

* :mod:`~insomnia_sync.watcher.watcher` -- :class:`SpecWatcher`, the polling
  loop that regenerates a workspace whenever its source's modification time
  advances.
* :mod:`~insomnia_sync.watcher.scanner` -- :class:`SpecScanner`, which finds
  OpenAPI/Swagger documents under a directory and registers them.
"""

from insomnia_sync.watcher.scanner import SpecScanner, looks_like_spec
from insomnia_sync.watcher.watcher import SpecWatcher, derive_output_path

__all__ = ["SpecWatcher", "SpecScanner", "derive_output_path", "looks_like_spec"]
