"""Release orchestration for version-file driven projects."""

__version__ = "0.1.0"
