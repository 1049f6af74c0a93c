"""declguard — keeps exported types in the files they belong in."""

import sys

if sys.version_info < (3, 10):
    raise RuntimeError(
        f"declguard requires Python 3.10+, but you're running {sys.version}. "
        "Please upgrade Python or use a virtual environment with 3.10+."
    )

__version__ = "0.3.0"

from declguard.core.models import (  # noqa: E402, F401
    DeclarationKind,
    DeclarationRecord,
    PolicyConfig,
    PolicyVerdict,
    Verdict,
    ViolationRecord,
)
from declguard.engine.policy import FileScope, PolicyEngine  # noqa: E402, F401

__all__ = [
    "__version__",
    "DeclarationKind",
    "DeclarationRecord",
    "FileScope",
    "PolicyConfig",
    "PolicyEngine",
    "PolicyVerdict",
    "Verdict",
    "ViolationRecord",
]
