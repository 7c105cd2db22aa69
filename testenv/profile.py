import os
import logging
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

from testenv.paths import get_runtime_home

logger = logging.getLogger(__name__)

RUNTIME_HOME_KEY = "TESTENV_RUNTIME_HOME"
HOME_KEY = "USERPROFILE" if os.name == "nt" else "HOME"


@dataclass(frozen=True)
class RuntimeProfile:
    """
    Directory-writability constraints of the running interpreter.

    Resolved once at startup. When the runtime home is not writable the guard
    redirects `runtime_home_key` to a directory under the temp dir so the
    system preference root has somewhere to live.
    """
    runtime_home_writable: bool = True
    runtime_home_key: str = RUNTIME_HOME_KEY
    home_key: str = HOME_KEY

    @classmethod
    def detect(cls, runtime_home: Optional[Path] = None) -> "RuntimeProfile":
        home = runtime_home if runtime_home is not None else get_runtime_home()
        writable = home.is_dir() and os.access(home, os.W_OK)
        logger.debug(f"Runtime home {home} writable: {writable}")
        return cls(runtime_home_writable=writable)
