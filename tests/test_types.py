"""Tests for identifier value types."""

import pytest

from hubspot_api.errors import DecodeError
from hubspot_api.types import ClientId, ContactId, PortalId, UserToken

from tests.conftest import SAMPLE_CLIENT_ID, SAMPLE_PORTAL_ID, SAMPLE_USER_TOKEN, SAMPLE_VID


class TestByteIdentifiers:
    """ClientId and UserToken wrap bytes and encode as JSON strings."""

    def test_str_is_stored_as_utf8_bytes(self):
        assert ClientId(SAMPLE_CLIENT_ID).value == SAMPLE_CLIENT_ID.encode()
        assert UserToken(b"abc").value == b"abc"

    @pytest.mark.parametrize("cls", [ClientId, UserToken])
    def test_json_round_trip(self, cls):
        ident = cls("café-token")
        assert ident.to_json() == "café-token"
        assert cls.from_json(ident.to_json()) == ident

    def test_display_form(self):
        assert str(UserToken(SAMPLE_USER_TOKEN)) == SAMPLE_USER_TOKEN

    def test_client_id_must_not_be_empty(self):
        with pytest.raises(ValueError):
            ClientId("")
        with pytest.raises(DecodeError) as exc_info:
            ClientId.from_json("")
        assert exc_info.value.type_name == "ClientId"

    def test_decode_wrong_kind_names_type(self):
        with pytest.raises(DecodeError) as exc_info:
            UserToken.from_json(123)
        assert exc_info.value.type_name == "UserToken"
        assert "expected string" in exc_info.value.reason

    def test_rejects_non_text(self):
        with pytest.raises(TypeError):
            UserToken(42)


class TestIntIdentifiers:
    """PortalId and ContactId wrap ints and encode as JSON numbers."""

    @pytest.mark.parametrize("cls", [PortalId, ContactId])
    def test_json_round_trip(self, cls):
        ident = cls(SAMPLE_PORTAL_ID)
        assert ident.to_json() == SAMPLE_PORTAL_ID
        assert cls.from_json(ident.to_json()) == ident

    @pytest.mark.parametrize("cls", [PortalId, ContactId])
    def test_decimal_text_round_trip(self, cls):
        ident = cls(SAMPLE_VID)
        assert str(ident) == "12345"
        assert cls.parse(str(ident)) == ident

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            PortalId.parse("62515abc")

    @pytest.mark.parametrize("bad", ["62515", 1.5, True, None, [1]])
    def test_decode_rejects_non_integers(self, bad):
        with pytest.raises(DecodeError) as exc_info:
            ContactId.from_json(bad)
        assert exc_info.value.type_name == "ContactId"

    def test_kinds_do_not_mix(self):
        assert PortalId(1) != ContactId(1)

    def test_contact_id_is_usable_as_dict_key(self):
        seen = {ContactId(SAMPLE_VID): "jo"}
        assert seen[ContactId(SAMPLE_VID)] == "jo"

    def test_portal_query_value(self):
        assert PortalId(SAMPLE_PORTAL_ID).query_value == "62515"

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            PortalId(True)
