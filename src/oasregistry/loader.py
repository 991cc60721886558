"""Import the registry or document an ``oasreg`` command operates on.

Targets are written ``package.module:attribute`` where the attribute path may
be dotted (``acme.billing.api:spec.registry``). The attribute may be:

* an :class:`~oasregistry.models.OpenAPIDocument`, returned as-is;
* a :class:`~oasregistry.registry.Registry`, which is built;
* a zero-argument callable returning either of the above.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from oasregistry.exceptions import TargetLoadError
from oasregistry.models import OpenAPIDocument
from oasregistry.registry import Registry

logger = logging.getLogger(__name__)


def load_target(target: str, app_dir: Optional[Path] = None) -> OpenAPIDocument:
    """Import *target* and return the document it describes.

    Args:
        target: ``package.module:attribute`` reference.
        app_dir: Directory to make importable before importing *target*
            (typically the project root).

    Returns:
        The built document.

    Raises:
        TargetLoadError: If the target is malformed, cannot be imported, or
            does not yield a registry or document.
        RegistryError: Any registration error raised while the target's
            module or factory declares its endpoints.
    """
    module_name, sep, attribute_path = target.partition(":")
    if not sep or not module_name or not attribute_path:
        raise TargetLoadError(
            f"Invalid target {target!r}; expected 'package.module:attribute'"
        )

    if app_dir is not None:
        app_dir_str = str(app_dir.resolve())
        if app_dir_str not in sys.path:
            sys.path.insert(0, app_dir_str)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise TargetLoadError(f"Cannot import module {module_name!r}: {exc}") from exc

    obj: Any = module
    for part in attribute_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise TargetLoadError(
                f"Module {module_name!r} has no attribute {attribute_path!r}"
            ) from None

    logger.debug("Loaded target %s (%s)", target, type(obj).__name__)
    return _to_document(obj, target)


def _to_document(obj: Any, target: str, allow_call: bool = True) -> OpenAPIDocument:
    if isinstance(obj, OpenAPIDocument):
        return obj
    if isinstance(obj, Registry):
        return obj.build_spec()
    if allow_call and callable(obj) and not isinstance(obj, type):
        return _to_document(obj(), target, allow_call=False)
    raise TargetLoadError(
        f"Target {target!r} is a {type(obj).__name__}; expected a Registry, "
        "an OpenAPIDocument, or a zero-argument callable returning one"
    )
