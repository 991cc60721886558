"""Discover the module identity of the running program.

Schema naming needs to know which organization owns the payload types. When
the caller does not say, :func:`discover_host_module` reads it from the
``__main__`` module's import spec: ``python -m acme.billing`` runs as
``acme.billing.__main__``, so the host module is ``acme.billing``.

Programs started from a plain script or an interactive session have no
module identity, and neither does ``python -m oasregistry``, where the
running program is this tool rather than the owner of the payloads.
Discovery then returns ``""``, which degrades naming to "no organization
known" rather than failing.
"""

from __future__ import annotations

import logging
import sys

logger = logging.getLogger(__name__)

_MAIN_SUFFIX = ".__main__"
_OWN_PACKAGE = __name__.partition(".")[0]


def discover_host_module() -> str:
    """Return the dotted module path of the running program, or ``""`` if unknown."""
    main = sys.modules.get("__main__")
    spec = getattr(main, "__spec__", None)
    name = getattr(spec, "name", None)
    if not name:
        logger.debug("Running program has no module spec; no host module known")
        return ""

    if name.endswith(_MAIN_SUFFIX):
        name = name[: -len(_MAIN_SUFFIX)]
    elif name == "__main__":
        return ""
    if name == _OWN_PACKAGE or name.startswith(_OWN_PACKAGE + "."):
        logger.debug("Running program is %s itself; no host module known", _OWN_PACKAGE)
        return ""
    logger.debug("Discovered host module %s", name)
    return name
