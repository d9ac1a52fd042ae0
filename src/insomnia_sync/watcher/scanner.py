"""Discover OpenAPI/Swagger documents in a directory tree.

Walks a directory, keeps files with a recognised extension (``.yml`` and
``.yaml`` by default), and sniffs their text for a root-level ``openapi:``
key, a root-level ``swagger:`` key, or root-level ``info:`` and ``paths:``
keys together. The sniff is a plain text check rather than a full parse so
that scanning a large tree stays cheap.

Markers must start a line: the Insomnia workspaces this tool writes embed the
source document *indented* under ``spec.contents``, so they never match and
are never picked up as sources themselves. Files whose stem already ends with
the output suffix are skipped as well.

See :class:`SpecScanner` for the main entry point.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterable, Optional

import pathspec

from insomnia_sync.exceptions import SourceNotFoundError
from insomnia_sync.watcher.watcher import DEFAULT_SUFFIX, SpecWatcher

logger = logging.getLogger(__name__)

_YAML_KEY = r"""^["']?{key}["']?[ \t]*:"""
_JSON_KEY = r'"{key}"\s*:'

# Directories that are always pruned during traversal.
_ALWAYS_SKIP = frozenset({
    ".git", ".hg", ".svn", "__pycache__", "node_modules", ".venv", "venv",
    ".tox", ".mypy_cache", ".ruff_cache",
})


def _markers(template: str) -> tuple[re.Pattern[str], ...]:
    return tuple(
        re.compile(template.format(key=key), re.MULTILINE)
        for key in ("openapi", "swagger", "info", "paths")
    )


_YAML_MARKERS = _markers(_YAML_KEY)
_JSON_MARKERS = _markers(_JSON_KEY)


def looks_like_spec(content: str, json_syntax: bool = False) -> bool:
    """Return whether *content* carries an OpenAPI/Swagger root marker.

    Example::

        >>> looks_like_spec("openapi: 3.0.0\\ninfo:\\n  title: x\\n")
        True
        >>> looks_like_spec("name: my-app\\nversion: 2\\n")
        False
    """
    openapi, swagger, info, paths = _JSON_MARKERS if json_syntax else _YAML_MARKERS
    if openapi.search(content) or swagger.search(content):
        return True
    return bool(info.search(content) and paths.search(content))


def _load_gitignore(root: Path) -> pathspec.PathSpec | None:
    """Load ``.gitignore`` from *root* if it exists, returning a PathSpec matcher."""
    gitignore = root / ".gitignore"
    if not gitignore.is_file():
        return None
    lines = gitignore.read_text(encoding="utf-8", errors="replace").splitlines()
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


class SpecScanner:
    """Find source documents under a directory and register them for watching.

    Args:
        extensions: File extensions to consider (case-insensitive).
        ignore: Extra gitignore-style patterns to exclude.
        respect_gitignore: Skip paths matched by ``<root>/.gitignore``.
        output_suffix: Stem suffix of generated workspaces; matching files
            are never treated as sources.
    """

    def __init__(
        self,
        extensions: Iterable[str] = (".yml", ".yaml"),
        ignore: Iterable[str] = (),
        respect_gitignore: bool = True,
        output_suffix: str = DEFAULT_SUFFIX,
    ) -> None:
        self.extensions = frozenset(ext.lower() for ext in extensions)
        self.output_suffix = output_suffix
        self._respect_gitignore = respect_gitignore
        patterns = list(ignore)
        self._ignore = pathspec.PathSpec.from_lines("gitwildmatch", patterns) if patterns else None

    def is_spec_file(self, path: Path) -> bool:
        """Return whether *path* is a candidate source document.

        Unreadable files are reported as non-matches, never as errors.
        """
        suffix = path.suffix.lower()
        if suffix not in self.extensions:
            return False
        if self.output_suffix and path.stem.endswith(self.output_suffix):
            return False
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable file %s: %s", path, exc)
            return False
        return looks_like_spec(content, json_syntax=(suffix == ".json"))

    def find_specs(self, root: str | Path) -> list[Path]:
        """Walk *root* and return matching documents, sorted by path.

        Raises:
            SourceNotFoundError: If *root* is not a directory.
        """
        root_path = Path(root)
        if not root_path.is_dir():
            raise SourceNotFoundError(f"Directory not found: {root_path}")

        gitignore_spec = _load_gitignore(root_path) if self._respect_gitignore else None

        def _excluded(rel_path: str) -> bool:
            if gitignore_spec and gitignore_spec.match_file(rel_path):
                return True
            return bool(self._ignore and self._ignore.match_file(rel_path))

        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root_path):
            rel_dir = os.path.relpath(dirpath, root_path)

            dirnames[:] = sorted(
                d for d in dirnames
                if d not in _ALWAYS_SKIP
                and not _excluded((os.path.join(rel_dir, d) if rel_dir != "." else d) + "/")
            )

            for fname in filenames:
                rel_path = os.path.join(rel_dir, fname) if rel_dir != "." else fname
                if _excluded(rel_path):
                    continue
                path = Path(dirpath) / fname
                if path.is_file() and self.is_spec_file(path):
                    found.append(path)

        return sorted(found)

    def scan_and_watch(
        self,
        root: str | Path,
        watcher: SpecWatcher,
        max_ticks: Optional[int] = None,
    ) -> int:
        """Register every document under *root* and hand off to the watcher.

        When at least one file was registered this call blocks in
        :meth:`SpecWatcher.start`; otherwise it logs that nothing was found
        and returns immediately.

        Returns:
            The number of files registered.
        """
        registered = 0
        for path in self.find_specs(root):
            try:
                watcher.add_file(path)
            except SourceNotFoundError as exc:
                logger.warning("Could not add file to watch: %s", exc)
                continue
            registered += 1

        if not registered:
            logger.warning("No OpenAPI files found in directory: %s", root)
            return 0

        logger.info("Found %d OpenAPI files to watch", registered)
        watcher.start(max_ticks=max_ticks)
        return registered
