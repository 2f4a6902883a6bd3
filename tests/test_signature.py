"""Tests for Slack request signing and verification."""

import pytest

from aqibot.models import RejectReason, SignedRequest
from aqibot.signature import sign_request, verify_request, verify_signature


SECRET = b"8f742231b10e8888abcd99yyyzzz85a5"
TIMESTAMP = "1531420618"

# Example request from Slack's request-signing documentation
SLACK_DOC_BODY = (
    b"token=xyzz0WbapA4vBCDEFasx0q6G&team_id=T1DC2JH3J&team_domain=testteamnow"
    b"&channel_id=G8PSS9T3V&channel_name=foobar&user_id=U2CERLKJA&user_name=roadrunner"
    b"&command=%2Fwebhook-collect&text=&response_url=https%3A%2F%2Fhooks.slack.com"
    b"%2Fcommands%2FT1DC2JH3J%2F397700885554%2F96rGlfmibIGlgcZRskXaIFfN"
    b"&trigger_id=398738663015.47445629121.803a0bc887a14d10d2c447fce8b6703c"
)
SLACK_DOC_SIGNATURE = "v0=a2114d57b48eac39b9ad189dd8316235a7b4a8d21a10bd27519666489c69b503"

BODY = b"command=%2Faqi&text=nyc&user_id=U123"


def _flip(data: bytes, index: int) -> bytes:
    return data[:index] + bytes([data[index] ^ 0x01]) + data[index + 1:]


class TestSignRequest:
    """Tests for sign_request."""

    def test_matches_slack_documentation(self):
        """Signature matches the worked example from Slack."""
        assert sign_request(SECRET, TIMESTAMP, SLACK_DOC_BODY) == SLACK_DOC_SIGNATURE

    def test_version_prefix(self):
        """Header value is prefixed with the version."""
        header = sign_request(SECRET, TIMESTAMP, BODY)
        version, digest = header.split("=")
        assert version == "v0"
        assert len(digest) == 64


class TestVerifySignature:
    """Tests for verify_signature."""

    def test_slack_documentation_example(self):
        """The documented request verifies."""
        result = verify_signature(SECRET, TIMESTAMP, SLACK_DOC_BODY, SLACK_DOC_SIGNATURE)
        assert result.verified is True
        assert result.reason is None

    def test_round_trip(self):
        """A signature computed from the same inputs verifies."""
        header = sign_request(SECRET, TIMESTAMP, BODY)
        assert verify_signature(SECRET, TIMESTAMP, BODY, header).verified is True

    def test_uppercase_hex_accepted(self):
        """Hex digest is decoded, so case does not matter."""
        version, digest = sign_request(SECRET, TIMESTAMP, BODY).split("=")
        result = verify_signature(SECRET, TIMESTAMP, BODY, f"{version}={digest.upper()}")
        assert result.verified is True

    @pytest.mark.parametrize("index", [0, 10, len(BODY) - 1])
    def test_flipped_body_byte_rejected(self, index):
        """Changing any body byte fails verification."""
        header = sign_request(SECRET, TIMESTAMP, BODY)
        result = verify_signature(SECRET, TIMESTAMP, _flip(BODY, index), header)
        assert result.verified is False
        assert result.reason == RejectReason.SIGNATURE_MISMATCH

    def test_changed_timestamp_rejected(self):
        """Changing the timestamp fails verification."""
        header = sign_request(SECRET, TIMESTAMP, BODY)
        result = verify_signature(SECRET, "1531420619", BODY, header)
        assert result.reason == RejectReason.SIGNATURE_MISMATCH

    def test_flipped_digest_rejected(self):
        """Changing a digest character fails verification."""
        header = sign_request(SECRET, TIMESTAMP, BODY)
        last = "0" if header[-1] != "0" else "1"
        result = verify_signature(SECRET, TIMESTAMP, BODY, header[:-1] + last)
        assert result.reason == RejectReason.SIGNATURE_MISMATCH

    def test_wrong_secret_rejected(self):
        """A different secret fails verification."""
        header = sign_request(b"other-secret", TIMESTAMP, BODY)
        result = verify_signature(SECRET, TIMESTAMP, BODY, header)
        assert result.reason == RejectReason.SIGNATURE_MISMATCH

    def test_version_is_part_of_signing_base(self):
        """A digest signed under another version does not verify as v0."""
        _, digest = sign_request(SECRET, TIMESTAMP, BODY, version="v1").split("=")
        result = verify_signature(SECRET, TIMESTAMP, BODY, f"v0={digest}")
        assert result.reason == RejectReason.SIGNATURE_MISMATCH

    @pytest.mark.parametrize("header", ["", "v0", "v0=abc=def", "a=b=c=d"])
    def test_wrong_part_count(self, header):
        """Anything but exactly one '=' is an invalid digest format."""
        result = verify_signature(SECRET, TIMESTAMP, BODY, header)
        assert result.verified is False
        assert result.reason == RejectReason.INVALID_DIGEST_FORMAT

    @pytest.mark.parametrize("digest", ["not-hex", "abc", "zz" * 32])
    def test_undecodable_digest(self, digest):
        """A digest that is not valid hex is an invalid digest format."""
        result = verify_signature(SECRET, TIMESTAMP, BODY, f"v0={digest}")
        assert result.reason == RejectReason.INVALID_DIGEST_FORMAT

    @pytest.mark.parametrize("separator", [" ", "\t", "\n"])
    def test_whitespace_in_digest(self, separator):
        """A correct digest with whitespace inserted is an invalid digest format."""
        version, digest = sign_request(SECRET, TIMESTAMP, BODY).split("=")
        spaced = separator.join(digest[i : i + 2] for i in range(0, len(digest), 2))

        result = verify_signature(SECRET, TIMESTAMP, BODY, f"{version}={spaced}")
        assert result.verified is False
        assert result.reason == RejectReason.INVALID_DIGEST_FORMAT

    def test_short_digest_mismatch(self):
        """Valid hex of the wrong length is a mismatch."""
        result = verify_signature(SECRET, TIMESTAMP, BODY, "v0=abcd")
        assert result.reason == RejectReason.SIGNATURE_MISMATCH

    def test_old_timestamp_accepted_by_default(self):
        """Without max_age_s, stale timestamps still verify."""
        header = sign_request(SECRET, TIMESTAMP, BODY)
        result = verify_signature(SECRET, TIMESTAMP, BODY, header, now=2_000_000_000)
        assert result.verified is True


class TestFreshnessCheck:
    """Tests for the optional replay window."""

    def test_fresh_timestamp_accepted(self):
        """Timestamp within the window verifies."""
        header = sign_request(SECRET, TIMESTAMP, BODY)
        result = verify_signature(
            SECRET, TIMESTAMP, BODY, header, max_age_s=300, now=int(TIMESTAMP) + 299
        )
        assert result.verified is True

    def test_stale_timestamp_rejected(self):
        """Timestamp older than the window is rejected."""
        header = sign_request(SECRET, TIMESTAMP, BODY)
        result = verify_signature(
            SECRET, TIMESTAMP, BODY, header, max_age_s=300, now=int(TIMESTAMP) + 301
        )
        assert result.reason == RejectReason.STALE_TIMESTAMP

    def test_future_timestamp_rejected(self):
        """Timestamp too far in the future is rejected."""
        header = sign_request(SECRET, TIMESTAMP, BODY)
        result = verify_signature(
            SECRET, TIMESTAMP, BODY, header, max_age_s=300, now=int(TIMESTAMP) - 301
        )
        assert result.reason == RejectReason.STALE_TIMESTAMP

    def test_non_numeric_timestamp_rejected(self):
        """Timestamps that are not integers cannot be checked."""
        header = sign_request(SECRET, "yesterday", BODY)
        result = verify_signature(SECRET, "yesterday", BODY, header, max_age_s=300)
        assert result.reason == RejectReason.STALE_TIMESTAMP


class TestVerifyRequest:
    """Tests for verify_request."""

    def test_signed_request(self):
        """SignedRequest fields are passed through."""
        request = SignedRequest(
            timestamp=TIMESTAMP,
            raw_body=BODY,
            signature_header=sign_request(SECRET, TIMESTAMP, BODY),
        )
        assert verify_request(SECRET, request).verified is True

    def test_body_not_mutated(self):
        """Verification leaves the raw body untouched."""
        request = SignedRequest(TIMESTAMP, BODY, "v0=00")
        verify_request(SECRET, request)
        assert request.raw_body == BODY
