"""Map OpenAPI paths and server URLs onto Insomnia template variables.

Two small transformations live here:

* :func:`build_url` turns a path template such as ``/users/{id}`` into the
  request URL ``{{ _.base_url }}/users/{{ _.id }}``. Only placeholders backed
  by a declared ``in: path`` parameter are rewritten; anything else stays as
  written.
* :func:`parse_server_url` splits a server URL into the ``scheme``, ``host``
  and ``base_path`` variables of a sub-environment, which the base
  environment recombines into ``base_url``.
"""

from __future__ import annotations

from typing import Iterable

from insomnia_sync.models import APIParameter, ParameterLocation

BASE_URL_VARIABLE = "{{ _.base_url }}"
BASE_URL_TEMPLATE = "{{ _.scheme }}://{{ _.host }}{{ _.base_path }}"

_SCHEMES = ("https", "http")


def template_variable(name: str) -> str:
    """Return the Insomnia reference for variable *name*."""
    return f"{{{{ _.{name} }}}}"


def build_url(path: str, parameters: Iterable[APIParameter]) -> str:
    """Return the templated request URL for *path*.

    Args:
        path: The OpenAPI path template, e.g. ``/users/{id}``.
        parameters: The operation's parameters (path-level ones merged in).

    Returns:
        ``{{ _.base_url }}`` followed by the path with each path-parameter
        placeholder replaced by its variable reference.

    Example::

        >>> build_url("/users/{id}", [APIParameter(name="id", location="path")])
        '{{ _.base_url }}/users/{{ _.id }}'
    """
    url = path
    for param in parameters:
        if param.location != ParameterLocation.PATH:
            continue
        url = url.replace(f"{{{param.name}}}", template_variable(param.name))
    return BASE_URL_VARIABLE + url


def parse_server_url(server_url: str) -> tuple[str, str, str]:
    """Split a server URL into ``(scheme, host, base_path)``.

    ``http://`` and ``https://`` prefixes are recognised; anything else is
    treated as scheme-less and defaults to ``http``. The host runs up to the
    first ``/``; the base path is the rest (with its leading slash), or empty.

    Example::

        >>> parse_server_url("https://api.example.com/v2")
        ('https', 'api.example.com', '/v2')
        >>> parse_server_url("example.com")
        ('http', 'example.com', '')
    """
    scheme = "http"
    remainder = server_url
    for candidate in _SCHEMES:
        prefix = f"{candidate}://"
        if server_url.startswith(prefix):
            scheme = candidate
            remainder = server_url[len(prefix):]
            break

    host, sep, rest = remainder.partition("/")
    base_path = f"/{rest}" if sep else ""
    return scheme, host, base_path
