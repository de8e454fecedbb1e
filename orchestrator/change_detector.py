"""Detects whether a sync run changed anything compared to the last commit."""

import logging
import subprocess
from pathlib import Path
from typing import Iterable, Optional, Union


class GitChangeDetector:
    """
    Asks git whether the working tree differs from the last commit.

    Only the given paths are inspected. When git is unavailable or the
    directory is not a repository the answer is "changed".
    """

    def __init__(self, repo_dir: Optional[Union[str, Path]] = None, logger: Optional[logging.Logger] = None):
        self.repo_dir = Path(repo_dir) if repo_dir else None
        self.logger = logger or logging.getLogger('notion_markdown_sync.orchestrator.change_detector')

    def has_changes(self, paths: Iterable[Union[str, Path]] = ()) -> bool:
        command = ['git', 'status', '--porcelain']
        path_args = [str(path) for path in paths]
        if path_args:
            command += ['--'] + path_args

        try:
            completed = subprocess.run(
                command,
                cwd=str(self.repo_dir) if self.repo_dir else None,
                capture_output=True,
                text=True,
                check=True
            )
        except (OSError, subprocess.CalledProcessError) as e:
            self.logger.debug(f"git status failed ({e}); assuming changes")
            return True

        return bool(completed.stdout.strip())


__all__ = ['GitChangeDetector']
