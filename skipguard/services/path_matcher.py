"""Changed-path filters for path-ignored and path-skipped commits."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from wcmatch import glob

GLOB_FLAGS = glob.GLOBSTAR | glob.DOTGLOB | glob.NEGATE | glob.NEGATEALL | glob.FORCEUNIX


class PathMatcher:
    """
    Evaluates changed files against ``paths_ignore`` and ``paths`` globs.

    Every pattern is matched against the whole repository-relative path:
    ``*`` stays within one path segment and also matches dotfiles, ``**``
    spans directories and a leading ``!`` excludes. A directory pattern such
    as ``docs`` or ``docs/*`` does not cover files nested below it.
    An empty pattern list never marks anything as skippable.
    """

    def __init__(self, paths_ignore: Sequence[str] = (), paths: Sequence[str] = ()):
        self.paths_ignore: List[str] = list(paths_ignore)
        self.paths: List[str] = list(paths)

    @staticmethod
    def _matches(path: str, patterns: List[str]) -> bool:
        return glob.globmatch(path, patterns, flags=GLOB_FLAGS)

    def is_path_ignored(self, changed_files: Iterable[str]) -> bool:
        """True when every changed file matches ``paths_ignore``."""
        if not self.paths_ignore:
            return False
        return all(self._matches(path, self.paths_ignore) for path in changed_files)

    def is_path_skipped(self, changed_files: Iterable[str]) -> bool:
        """True when none of the changed files matches ``paths``."""
        if not self.paths:
            return False
        return not any(self._matches(path, self.paths) for path in changed_files)

    def is_skippable(self, changed_files: Iterable[str]) -> bool:
        files = list(changed_files)
        return self.is_path_ignored(files) or self.is_path_skipped(files)
