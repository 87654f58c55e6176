"""Per-repository configuration (.acmojrc)."""

import json
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

from ..errors import RepositoryError, StorageError
from ..utils.git import find_repository_root


FILENAME = ".acmojrc"


@dataclass
class LocalConfig:
    """
    Repository submission settings.
    Stored at .acmojrc in the git repository root and meant to be
    committed together with the project.
    """

    problem_id: int

    @staticmethod
    def find_config(start: Optional[Path] = None) -> Optional[Path]:
        """
        Path of .acmojrc for the enclosing git repository, whether or not
        it exists yet. None when not inside a repository.
        """
        root = find_repository_root(start)
        if root is None:
            return None
        return root / FILENAME

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "LocalConfig":
        """Load the marker file; any malformed content is a StorageError."""
        if path is None:
            path = cls.find_config()
            if path is None:
                raise RepositoryError()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            problem_id = data["problemId"]
        except (OSError, ValueError, TypeError, KeyError) as e:
            raise StorageError(
                f"unable to read configuration file: {e}. try removing the file at {path}."
            ) from e

        if isinstance(problem_id, bool) or not isinstance(problem_id, int):
            raise StorageError(
                f"unable to read configuration file: invalid problemId {problem_id!r}. "
                f"try removing the file at {path}."
            )
        return cls(problem_id=problem_id)

    def save(self, path: Path) -> None:
        """Save the marker file."""
        data = {"problemId": self.problem_id}

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
        except OSError as e:
            raise StorageError(f"cannot write configuration file: {e}") from e
