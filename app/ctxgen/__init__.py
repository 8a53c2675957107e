"""ctxgen - interactive directory scanner and manifest generator.

Walks a directory tree with depth, visibility, size and pattern rules and
aggregates the selection into a manifest, either from the command line or
from an interactive terminal session.
"""

__version__ = "0.3.0"
