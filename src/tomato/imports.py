"""Import resolution: inline ``@import "file"`` statements before parsing.

    @import "buttons"        -> ./buttons.tom (relative to the importing file)
    @import './forms.tom'

Each statement is replaced by ``# Imported from <name>`` followed by the
fully resolved content of that file. Cycles are tracked per import path: a
file that is already being expanded higher up the same chain contributes
nothing and a CircularImportWarning is issued. The same file imported from
two different branches is inlined twice.

An imported file that cannot be read is replaced by a
``# Failed to import: <path>`` marker; the error is recorded and issued as
an ImportFailedWarning instead of being raised.
"""

import logging
import re
import warnings
from pathlib import Path

from .errors import CircularImportWarning, ImportFailedWarning, SourceReadError

logger = logging.getLogger(__name__)

IMPORT_STATEMENT = re.compile(r"""^@import\s+["'](.+?)["'][ \t\r]*$""", re.MULTILINE)
EXTENSION = ".tom"


def import_target(importer: Path, name: str) -> Path:
    """Filesystem path of ``@import "name"`` written in ``importer``."""
    if not name.endswith(EXTENSION):
        name += EXTENSION
    return (importer.parent / name).resolve()


class ImportResolver:
    """Resolves the imports of one root file.

    After ``resolve()``, ``warnings`` holds cycle messages and ``errors``
    holds unreadable-import messages.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def resolve(self) -> str:
        """Return the root source with every import inlined.

        Raises:
            SourceReadError: If the root file itself cannot be read.
        """
        self.warnings.clear()
        self.errors.clear()
        try:
            return self._inline(self.root, frozenset())
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(self.root, _reason(e)) from e

    def _inline(self, path: Path, active: frozenset[Path]) -> str:
        source = path.read_text(encoding="utf-8")
        active = active | {path}

        def replace(m: re.Match) -> str:
            target = import_target(path, m.group(1))
            if target in active:
                self._warn(CircularImportWarning, f"Circular import detected: {target.name}")
                return f"# Imported from {target.name}\n"

            try:
                content = self._inline(target, active)
            except (OSError, UnicodeDecodeError) as e:
                message = f'Cannot import "{target.name}": {_reason(e)}'
                self.errors.append(message)
                warnings.warn(message, ImportFailedWarning, stacklevel=2)
                return f"# Failed to import: {target}"

            logger.debug("inlined %s into %s", target, path)
            return f"# Imported from {target.name}\n{content}"

        return IMPORT_STATEMENT.sub(replace, source)

    def _warn(self, category: type[Warning], message: str) -> None:
        self.warnings.append(message)
        warnings.warn(message, category, stacklevel=3)


def _reason(error: Exception) -> str:
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    return str(error)


def resolve_imports(path: str | Path) -> str:
    """Read ``path`` and inline its imports recursively."""
    return ImportResolver(path).resolve()


def imported_files(path: str | Path) -> list[Path]:
    """The root file plus every existing file reachable through imports.

    Used by watch mode to know which files to poll. Unreadable imports are
    skipped.
    """
    root = Path(path).resolve()
    found: list[Path] = []
    seen: set[Path] = set()

    def visit(file: Path) -> None:
        if file in seen:
            return
        seen.add(file)
        try:
            source = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            if file == root:
                raise SourceReadError(root, _reason(e)) from e
            return
        found.append(file)
        for m in IMPORT_STATEMENT.finditer(source):
            visit(import_target(file, m.group(1)))

    visit(root)
    return found
