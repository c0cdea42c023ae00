"""
Checksum retrieval.

This package handles:
1. Fetching checksum documents
2. Detecting plain versus clear-signed manifests
3. Looking up the expected hash of a target file
"""

from .retriever import (
    ChecksumRetriever,
    parse_checksum_document,
    parse_clearsigned_manifest,
)

__all__ = ["ChecksumRetriever", "parse_checksum_document", "parse_clearsigned_manifest"]
