"""Find external tools even when ``PATH`` is incomplete.

Live CDs often boot with a ``PATH`` that lacks the directories holding
administrative tools (``dmidecode``, ``lshw``...), so tools that are
installed look missing.
"""
import os
import shutil
from typing import Iterable, Optional

ADMIN_DIRS = '/usr/sbin', '/sbin', '/usr/bin', '/bin'
"""Probed in this order after the search path."""


def find_command(name: str,
                 path: Optional[str] = None,
                 admin_dirs: Iterable[str] = ADMIN_DIRS) -> Optional[str]:
    """Returns the path of the executable ``name`` or ``None``.

    :param path: A ``PATH``-like string searched first. Defaults to
                 the ``PATH`` of this process.
    :param admin_dirs: Directories probed, in order, when the search
                       path has no ``name``.
    """
    found = shutil.which(name, path=path)
    if found:
        return os.path.abspath(found)
    for directory in admin_dirs:
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
    return None


def admin_path(path: Optional[str] = None, admin_dirs: Iterable[str] = ADMIN_DIRS) -> str:
    """Prepends the administrative directories to ``path``,
    dropping repeated entries.
    """
    if path is None:
        path = os.environ.get('PATH', '')
    entries = []
    for entry in list(admin_dirs) + path.split(os.pathsep):
        if entry and entry not in entries:
            entries.append(entry)
    return os.pathsep.join(entries)
