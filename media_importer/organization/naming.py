import re
import logging
from pathlib import Path, PurePath
from datetime import datetime
from typing import Optional

from .. import config
from ..exceptions import NameCollisionError, TemplateError
from ..models import PlannedTarget

_DIRECTIVE_RE = re.compile(r'%(.?)', re.DOTALL)


def format_template(dt: datetime, template: str) -> str:
    """
    Applies a strftime-style template to `dt`.

    Only the directives in `config.TEMPLATE_DIRECTIVES` are accepted, so a
    template means the same thing on every platform. Slashes in the result
    become subfolders of the destination.

    Raises:
        TemplateError: empty template, unknown or dangling directive, or a
                       result that would leave the destination folder.
    """
    if not template:
        raise TemplateError("Filename template is empty")

    for match in _DIRECTIVE_RE.finditer(template):
        code = match.group(1)
        if code not in config.TEMPLATE_DIRECTIVES:
            raise TemplateError(f"Unsupported directive '%{code}' in template {template!r}")

    try:
        name = dt.strftime(template)
    except (ValueError, UnicodeError) as e:
        raise TemplateError(f"Cannot format template {template!r}: {e}") from e

    parts = PurePath(name).parts
    if not name.strip() or PurePath(name).is_absolute() or '..' in parts:
        raise TemplateError(f"Template {template!r} produced an unusable name {name!r}")
    return name


def preview_filename(template: str, now: Optional[datetime] = None) -> str:
    """Example output of `template` for the current time, or "" if it is unusable."""
    try:
        name = format_template(now or datetime.now(), template)
    except TemplateError:
        return ""
    return f"{name}.{config.PREVIEW_EXT}"


def same_size(a: Path, b: Path) -> bool:
    try:
        return a.stat().st_size == b.stat().st_size
    except OSError:
        return False


class FilenamePlanner:
    def __init__(self, max_suffix: int = config.MAX_COLLISION_SUFFIX):
        self.max_suffix = max_suffix

    def plan(self, source: Path, dt: datetime, template: str, destination: Path, ext: str) -> PlannedTarget:
        """
        Picks the destination path for `source`.

        The first candidate is the formatted template plus `ext`. Taken names
        get `_1`, `_2`, ... before the extension. A candidate holding a file
        of the same size as `source` means it was imported before.

        Raises:
            TemplateError: see `format_template`.
            NameCollisionError: every suffix up to `max_suffix` is taken.
        """
        stem = format_template(dt, template)
        candidate = Path(destination) / f"{stem}.{ext}"

        counter = 0
        while candidate.exists():
            if same_size(source, candidate):
                return PlannedTarget(candidate, already_present=True)
            counter += 1
            if counter > self.max_suffix:
                raise NameCollisionError(
                    f"No free name for {source} after {self.max_suffix} attempts ({stem}_N.{ext})"
                )
            candidate = Path(destination) / f"{stem}_{counter}.{ext}"

        if counter:
            logging.debug(f"Name collision for {source}, using {candidate.name}")
        return PlannedTarget(candidate)
