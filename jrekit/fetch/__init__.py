"""Remote archive retrieval."""

from jrekit.fetch.http import ArchiveFetcher

__all__ = ["ArchiveFetcher"]
