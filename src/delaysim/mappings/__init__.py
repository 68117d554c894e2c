"""Request mappings carrying response delay configuration."""

from .stub_mapping import StubMapping, load_mappings

__all__ = ["StubMapping", "load_mappings"]
