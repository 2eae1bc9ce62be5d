"""gitgen: version-controlled, spec-driven file generation.

Specs (``*.gitgen.md``) describe how an output file is generated.
Directory-level ``.gitgen.md`` files cascade their settings onto every
spec beneath them.  Generations are staged, committed and logged in a
``.gitgen/`` store that works like a tiny git:

  - cascading resolution of directory and leaf specs
  - explicit compaction of several specs into one
  - a content-addressed object store with an append-only generation log
  - branch refs, HEAD and repository config
"""

__version__ = "0.1.0"
__description__ = "Version-controlled, spec-driven file generation"

from gitgen.core.orchestrator import Orchestrator
from gitgen.core.repository import Repository, open_repository
from gitgen.core.resolver import CascadingResolver

__all__ = [
    "CascadingResolver",
    "Orchestrator",
    "Repository",
    "open_repository",
    "__version__",
]
