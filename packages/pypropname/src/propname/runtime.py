from pathlib import Path
from typing import Optional

from .builder import PropertyNames


def _find_project_root(start_dir: Optional[Path] = None) -> Path:
    """
    Finds the project root by searching upwards for common markers.
    Search priority: pyproject.toml -> .git
    """
    current_dir = (start_dir or Path.cwd()).resolve()
    while current_dir.parent != current_dir:  # Stop at filesystem root
        if (current_dir / "pyproject.toml").is_file():
            return current_dir
        if (current_dir / ".git").is_dir():
            return current_dir
        current_dir = current_dir.parent
    return start_dir or Path.cwd()


# Global Runtime Instance
names = PropertyNames.from_path(_find_project_root())

of = names.of
any_ = names.any_
name = names.name
name_of = names.name_of
recording = names.recording
