"""Directory snapshots and the navigation stack.

A ``Dir`` is one listed directory plus its selection index (``ind``) and
scroll anchor (``pos``, the selection's row inside the visible window).
``Nav`` keeps the stack of directories from the filesystem root down to the
working directory, the set of marked paths, and per-path scroll state so a
revisited directory comes back where it was left.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from .file_kind import FileKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileInfo:
    """One directory entry as observed by ``lstat``."""

    name: str
    mode: int
    size: int
    mtime: float
    kind: FileKind

    @classmethod
    def from_stat(cls, name: str, st: os.stat_result) -> FileInfo:
        return cls(
            name=name,
            mode=st.st_mode,
            size=st.st_size,
            mtime=st.st_mtime,
            kind=FileKind.from_mode(st.st_mode),
        )

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def mode_string(self) -> str:
        return stat.filemode(self.mode)


def read_dir(path: str, hidden: bool) -> list[FileInfo]:
    """List ``path`` with directories first, then by name."""
    entries: list[FileInfo] = []
    with os.scandir(path) as it:
        for entry in it:
            if not hidden and entry.name.startswith("."):
                continue
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError as exc:
                logger.warning("getting file information: %s", exc)
                continue
            entries.append(FileInfo.from_stat(entry.name, st))
    entries.sort(key=lambda f: (not f.is_dir, f.name))
    return entries


class Dir:
    """Snapshot of one directory listing with selection state."""

    def __init__(self, path: str, *, hidden: bool = False) -> None:
        self.path = path
        self.hidden = hidden
        self.fi: list[FileInfo] = []
        self.ind = 0
        self.pos = 0

    def __repr__(self) -> str:
        return f"Dir({self.path!r}, ind={self.ind}, pos={self.pos}, entries={len(self.fi)})"

    def load(self, ind: int, pos: int, height: int, name: str | None) -> None:
        """Read entries and restore selection, preferring the entry ``name``."""
        try:
            self.fi = read_dir(self.path, self.hidden)
        except OSError as exc:
            logger.warning("reading directory: %s", exc)
            self.fi = []

        if not self.fi:
            self.ind = 0
            self.pos = 0
            return

        ind = max(0, min(ind, len(self.fi) - 1))
        if name is not None and self.fi[ind].name != name:
            for i, f in enumerate(self.fi):
                if f.name == name:
                    pos += i - ind
                    ind = i
                    break
        self.ind = ind
        self.pos = max(0, min(pos, ind, max(0, height - 1)))

    def curr(self) -> FileInfo | None:
        if not self.fi:
            return None
        return self.fi[self.ind]


class Nav:
    """Directory stack (most recent last), marks and per-path scroll cache."""

    def __init__(self, path: str, height: int, *, hidden: bool = False) -> None:
        self.height = max(1, height)
        self.hidden = hidden
        self.dirs: list[Dir] = []
        self.marks: set[str] = set()
        self.inds: dict[str, int] = {}
        self.poss: dict[str, int] = {}
        self.names: dict[str, str] = {}
        self.cd(path)

    def _new_dir(self, path: str) -> Dir:
        d = Dir(path, hidden=self.hidden)
        d.load(self.inds.get(path, 0), self.poss.get(path, 0), self.height, self.names.get(path))
        return d

    def save(self, d: Dir) -> None:
        """Remember scroll state of ``d`` for the next visit."""
        self.inds[d.path] = d.ind
        self.poss[d.path] = d.pos
        curr = d.curr()
        if curr is not None:
            self.names[d.path] = curr.name

    def cd(self, path: str) -> None:
        """Rebuild the stack for ``path``, selecting each child in its parent."""
        target = os.path.abspath(os.path.expanduser(path))
        if not os.path.isdir(target):
            raise NotADirectoryError(f"not a directory: {target}")
        os.chdir(target)

        chain: list[str] = []
        current = target
        while True:
            chain.append(current)
            parent = os.path.dirname(current)
            if parent == current:
                break
            parent_child = os.path.basename(current)
            self.names[parent] = parent_child
            self.inds.setdefault(parent, 0)
            current = parent

        self.dirs = [self._new_dir(p) for p in reversed(chain)]

    def renew(self, height: int) -> None:
        """Reload every directory on the stack for a new pane height."""
        self.height = max(1, height)
        for d in self.dirs:
            self.save(d)
        self.dirs = [self._new_dir(d.path) for d in self.dirs]

    def curr_dir(self) -> Dir:
        return self.dirs[-1]

    def curr_file(self) -> FileInfo | None:
        return self.curr_dir().curr()

    def curr_path(self) -> str:
        d = self.curr_dir()
        f = d.curr()
        if f is None:
            return d.path
        return os.path.join(d.path, f.name)

    def up(self, count: int = 1) -> None:
        d = self.curr_dir()
        if d.ind == 0:
            return
        step = min(count, d.ind)
        d.ind -= step
        d.pos = max(0, d.pos - step)
        self.save(d)

    def down(self, count: int = 1) -> None:
        d = self.curr_dir()
        maxind = len(d.fi) - 1
        if d.ind >= maxind:
            return
        step = min(count, maxind - d.ind)
        d.ind += step
        d.pos = min(d.pos + step, self.height - 1, maxind)
        self.save(d)

    def top(self) -> None:
        d = self.curr_dir()
        d.ind = 0
        d.pos = 0
        self.save(d)

    def bottom(self) -> None:
        d = self.curr_dir()
        maxind = len(d.fi) - 1
        if maxind < 0:
            return
        d.ind = maxind
        d.pos = min(self.height - 1, maxind)
        self.save(d)

    def updir(self) -> None:
        if len(self.dirs) <= 1:
            return
        self.save(self.curr_dir())
        self.dirs.pop()
        os.chdir(self.curr_dir().path)

    def open(self) -> str | None:
        """Enter the selected directory; return the path if it is a file."""
        f = self.curr_file()
        if f is None:
            return None
        path = self.curr_path()
        if not os.path.isdir(path):
            return path
        os.chdir(path)
        self.save(self.curr_dir())
        self.dirs.append(self._new_dir(path))
        return None

    def toggle_mark(self) -> None:
        if self.curr_file() is None:
            return
        path = self.curr_path()
        if path in self.marks:
            self.marks.discard(path)
        else:
            self.marks.add(path)
        self.down()

    def invert_marks(self) -> None:
        d = self.curr_dir()
        for f in d.fi:
            path = os.path.join(d.path, f.name)
            if path in self.marks:
                self.marks.discard(path)
            else:
                self.marks.add(path)

    def clear_marks(self) -> None:
        self.marks.clear()

    def marked_or_current(self) -> list[str]:
        """Return marked paths in order, or the selected path when none are marked."""
        if self.marks:
            return sorted(self.marks)
        if self.curr_file() is None:
            return []
        return [self.curr_path()]


def home_shorthand(path: str, home: str | None = None) -> str:
    """Replace the home directory prefix of ``path`` with ``~``."""
    home = (home if home is not None else str(Path.home())).rstrip(os.sep)
    if not home:
        return path
    if path == home or path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path
