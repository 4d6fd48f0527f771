"""Metadata access: the lookup used by playlist parsing and the tag codec glue."""

from .lookup import MetadataLookup, MutagenMetadataLookup, NullMetadataLookup

__all__ = ["MetadataLookup", "MutagenMetadataLookup", "NullMetadataLookup"]
