import pytest

from wgclient.api_client_helpers import ResponseEnvelope, ResponseParser
from wgclient.exceptions import ServerError


def envelope(body: bytes, status: int = 200) -> ResponseEnvelope:
    return ResponseEnvelope(status=status, body=body, content_type="application/json")


class TestDecode:
    def test_empty_body_is_none(self):
        assert ResponseParser.decode_json(envelope(b"  ")) is None

    def test_invalid_json(self):
        with pytest.raises(ServerError) as excinfo:
            ResponseParser.decode_json(envelope(b"<html>", status=200))
        assert excinfo.value.status_code == 200


class TestPeers:
    def test_bare_array(self):
        peers = ResponseParser.parse_peers(envelope(b'[{"id": "1", "enabled": true}]'))
        assert [peer.id for peer in peers] == ["1"]

    def test_wrapped_array(self):
        peers = ResponseParser.parse_peers(envelope(b'{"clients": [{"id": "2"}]}'))
        assert [peer.id for peer in peers] == ["2"]

    def test_empty_array(self):
        assert ResponseParser.parse_peers(envelope(b"[]")) == []

    @pytest.mark.parametrize("body", [b'{"id": "1"}', b"null", b'"text"'])
    def test_non_array_rejected(self, body):
        with pytest.raises(ServerError):
            ResponseParser.parse_peers(envelope(body))


class TestCreatedPeer:
    def test_direct_record(self):
        peer = ResponseParser.parse_created_peer(envelope(b'{"id": "9", "name": "new"}'))
        assert peer is not None and peer.name == "new"

    def test_wrapped_record(self):
        peer = ResponseParser.parse_created_peer(envelope(b'{"client": {"id": "9"}}'))
        assert peer is not None and peer.id == "9"

    @pytest.mark.parametrize("body", [b'{"success": true}', b""])
    def test_no_record(self, body):
        assert ResponseParser.parse_created_peer(envelope(body)) is None


class TestErrorMessage:
    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            (b'{"error": "Incorrect Password"}', "Incorrect Password"),
            (b'{"message": "Nope"}', "Nope"),
            (b'{"statusCode": 500}', '{"statusCode": 500}'),
            (b"plain failure", "plain failure"),
            (b"", ""),
        ],
    )
    def test_extracts_reason(self, body, expected):
        assert ResponseParser.error_message(envelope(body, status=500)) == expected


def test_envelope_text_replaces_invalid_bytes():
    assert ResponseEnvelope(200, b"ok\xff").text() == "ok�"
