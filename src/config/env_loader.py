"""Environment variable loading.

The model credential and runtime overrides come from the process
environment; a .env file is only a convenience for local runs.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def find_env_file(project_dir: Path = None) -> Optional[Path]:
    """Return the .env file to load, if any.
    
    The project root is checked first, then its parent (for checkouts
    sharing one .env across several services).
    """
    if project_dir is None:
        # src/config/env_loader.py -> project root
        project_dir = Path(__file__).parent.parent.parent
    
    for candidate in (project_dir / ".env", project_dir.parent / ".env"):
        if candidate.exists():
            return candidate
    return None


def load_environment_variables(project_dir: Path = None) -> Optional[Path]:
    """Load environment variables from a .env file.
    
    Variables already present in the environment are not overridden.
    
    Args:
        project_dir: Project root directory. If None, calculates from this file.
    
    Returns:
        Path of the file that was loaded, or None
    """
    env_file = find_env_file(project_dir)
    if env_file is not None:
        load_dotenv(env_file)
    return env_file
