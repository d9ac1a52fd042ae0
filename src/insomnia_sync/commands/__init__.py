"""Built-in CLI sub-commands for insomnia-sync.

* :mod:`~insomnia_sync.commands.convert` -- one-shot conversion to a file or
  stdout.
* :mod:`~insomnia_sync.commands.watch` -- poll files (or a scanned directory)
  and regenerate workspaces on change.
* :mod:`~insomnia_sync.commands.inspect` -- preview requests and
  environments without writing anything.

Each module exports a plain callback function registered directly on the
root app in :mod:`insomnia_sync.app`.
"""
