"""
Unit tests for checksum verification.
"""

import hashlib

import pytest

from wrapperkit.core.exceptions import ChecksumMismatchError
from wrapperkit.core.verification import (
    SHA_256_ALGORITHM,
    HashVerifier,
    compute_file_hash,
)


@pytest.fixture
def fixture_file(tmp_path):
    file = tmp_path / "maven-0.9.zip"
    file.write_bytes(b"distribution bytes" * 1000)
    return file


class TestComputeFileHash:
    """Test compute_file_hash function."""

    def test_sha256(self, fixture_file):
        expected = hashlib.sha256(fixture_file.read_bytes()).hexdigest()
        assert compute_file_hash(fixture_file) == expected

    def test_sha512(self, fixture_file):
        expected = hashlib.sha512(fixture_file.read_bytes()).hexdigest()
        assert compute_file_hash(fixture_file, "SHA-512") == expected

    def test_algorithm_name_variants(self, fixture_file):
        """'SHA-256', 'sha256' and 'SHA_256' all mean the same digest."""
        digest = compute_file_hash(fixture_file, "SHA-256")
        assert compute_file_hash(fixture_file, "sha256") == digest
        assert compute_file_hash(fixture_file, "SHA_256") == digest

    def test_lowercase_hex_output(self, fixture_file):
        digest = compute_file_hash(fixture_file)
        assert digest == digest.lower()
        assert len(digest) == 64

    def test_unsupported_algorithm(self, fixture_file):
        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            compute_file_hash(fixture_file, "crc32")

    def test_nonexistent_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            compute_file_hash(tmp_path / "missing.zip")


class TestHashVerifier:
    """Test HashVerifier.verify."""

    def test_verify_matching_checksum(self, fixture_file):
        expected = hashlib.sha256(fixture_file.read_bytes()).hexdigest()

        HashVerifier().verify(
            fixture_file, "distributionSha256Sum", SHA_256_ALGORITHM, expected
        )

    def test_verify_case_insensitive(self, fixture_file):
        expected = hashlib.sha256(fixture_file.read_bytes()).hexdigest()

        HashVerifier().verify(
            fixture_file, "distributionSha256Sum", SHA_256_ALGORITHM, expected.upper()
        )

    def test_verify_ignores_surrounding_whitespace(self, fixture_file):
        expected = hashlib.sha256(fixture_file.read_bytes()).hexdigest()

        HashVerifier().verify(
            fixture_file, "distributionSha256Sum", SHA_256_ALGORITHM, f"  {expected}\n"
        )

    def test_mismatch_names_property(self, fixture_file):
        with pytest.raises(ChecksumMismatchError) as exc_info:
            HashVerifier().verify(
                fixture_file, "distributionSha256Sum", SHA_256_ALGORITHM, "a" * 64
            )

        message = str(exc_info.value)
        assert "distributionSha256Sum" in message
        assert "SHA-256" in message
        assert str(fixture_file) in message
        assert "might be compromised" in message

    @pytest.mark.parametrize("expected", ["", "   "])
    def test_empty_expected_sum_is_not_a_skip(self, fixture_file, expected):
        """Deciding to skip verification is the caller's job."""
        with pytest.raises(ChecksumMismatchError):
            HashVerifier().verify(
                fixture_file, "distributionSha256Sum", SHA_256_ALGORITHM, expected
            )

    def test_verify_nonexistent_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            HashVerifier().verify(
                tmp_path / "missing.zip", "distributionSha256Sum", SHA_256_ALGORITHM, "a" * 64
            )
