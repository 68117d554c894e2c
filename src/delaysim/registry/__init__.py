"""File-backed distribution registry."""

from .distribution_registry import DistributionRegistry, get_default_registry
from .file_source import DirectoryFileSource, FileSource, InMemoryFileSource
from .parser import parse_distributions, parse_document

__all__ = [
    "DistributionRegistry",
    "get_default_registry",
    "FileSource",
    "DirectoryFileSource",
    "InMemoryFileSource",
    "parse_distributions",
    "parse_document",
]
