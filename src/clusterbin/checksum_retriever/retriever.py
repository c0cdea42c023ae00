"""
Checksum document retrieval and parsing.

A checksum document is either a plain file whose first whitespace-separated
token is the hash, or a clear-signed manifest listing "hash  filename" records
between the signed-message header and the signature header. The manifest is
parsed textually; the signature itself is never verified.
"""

import logging

from clusterbin.clusterbin_exceptions import NotFoundError
from clusterbin.clusterbin_logger import ClusterbinLogger
from clusterbin.clusterbin_utils import HttpUtils

SIGNED_MESSAGE_HEADER = "-----BEGIN PGP SIGNED MESSAGE-----"
SIGNATURE_HEADER = "-----BEGIN PGP SIGNATURE-----"
HASH_HEADER_PREFIX = "Hash: "


def parse_clearsigned_manifest(content: str, target_filename: str) -> str:
    """
    Return the hash recorded for target_filename in a clear-signed manifest.

    Lines before the signed-message header and everything from the signature
    header onwards are never inspected. The first record whose filename equals
    target_filename exactly wins.

    Raises:
        NotFoundError: If no record matches target_filename
    """
    in_message = False

    for line in content.splitlines():
        if line.startswith(SIGNED_MESSAGE_HEADER):
            in_message = True
            continue

        if line.startswith(SIGNATURE_HEADER):
            break

        if not in_message:
            continue

        if line.startswith(HASH_HEADER_PREFIX) or not line.strip():
            continue

        parts = line.split()
        if len(parts) >= 2 and parts[1] == target_filename:
            return parts[0]

    raise NotFoundError(f"hash not found for file: {target_filename}")


def parse_checksum_document(content: str, target_filename: str) -> str:
    """
    Extract the expected hash from a checksum document of either format.

    Raises:
        NotFoundError: If the document holds no hash for target_filename
    """
    if SIGNED_MESSAGE_HEADER in content:
        return parse_clearsigned_manifest(content, target_filename)

    # plain documents map 1:1 to a single artifact, so the filename is not checked
    parts = content.split()
    if not parts:
        raise NotFoundError(f"empty checksum document for file: {target_filename}")
    return parts[0]


class ChecksumRetriever:
    """
    Fetches checksum documents and returns the expected hash of a target file.
    """

    def __init__(self, http: HttpUtils, logger: ClusterbinLogger):
        self.http = http
        self.logger = logger

    def fetch_hash(self, url: str, target_filename: str) -> str:
        """
        Fetch the checksum document at url and return the hash for target_filename.

        Raises:
            NetworkError: On transport failure
            HTTPStatusError: If the response status is not 200
            NotFoundError: If target_filename is missing from the manifest
        """
        content = self.http.get_text(url)
        expected_hash = parse_checksum_document(content, target_filename)
        self.logger.log(f"Expected hash of {target_filename}: {expected_hash}", logging.DEBUG)
        return expected_hash
