"""Tests for ParameterSet, Moment and Credentials models."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from core.domain.models import REDACTED, Credentials, Moment, NumberLiteral, ParameterSet, ValueShape, shape_of
from core.errors import ParseError


class TestParameterSet:
    def test_last_write_wins(self) -> None:
        params = ParameterSet()
        params.set("antithesis.duration", 30.0)
        params.set("antithesis.duration", 60.0)
        assert params.get("antithesis.duration") == 60.0
        assert len(params) == 1

    def test_shape_change_rejected(self) -> None:
        params = ParameterSet({"antithesis.duration": 30.0})
        with pytest.raises(ParseError, match="already a float"):
            params.set("antithesis.duration", "thirty")

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(ParseError):
            ParameterSet().set("", "x")

    def test_merge_overlays(self) -> None:
        base = ParameterSet({"antithesis.duration": 30.0, "antithesis.description": "base"})
        overlay = ParameterSet({"antithesis.duration": 60.0, "antithesis.report.recipients": "team@example.com"})
        base.merge(overlay)
        assert base.to_json() == {
            "antithesis.duration": 60.0,
            "antithesis.description": "base",
            "antithesis.report.recipients": "team@example.com",
        }

    def test_preserves_insertion_order(self) -> None:
        params = ParameterSet({"b": "1", "a": "2", "c": "3"})
        assert params.keys() == ["b", "a", "c"]

    def test_moment_serializes_nested(self) -> None:
        params = ParameterSet({"antithesis.debugging.session": Moment(session_id="s", input_hash="123", vtime=1.5)})
        assert params.to_json() == {
            "antithesis.debugging.session": {"session_id": "s", "input_hash": "123", "vtime": 1.5}
        }

    def test_redaction(self) -> None:
        params = ParameterSet(
            {
                "antithesis.duration": 30.0,
                "antithesis.integrations.github.token": "secret_token_123",
                "antithesis.integrations.github.callback_url": "https://example.com/callback",
                "antithesis.report.recipients": "user@example.com;other@example.com",
            }
        )
        redacted = params.to_redacted_json()
        assert redacted["antithesis.duration"] == 30.0
        assert redacted["antithesis.integrations.github.callback_url"] == "https://example.com/callback"
        assert redacted["antithesis.integrations.github.token"] == REDACTED
        assert redacted["antithesis.report.recipients"] == REDACTED
        # Original values untouched.
        assert params.get("antithesis.integrations.github.token") == "secret_token_123"

    def test_shape_of(self) -> None:
        assert shape_of("x") is ValueShape.STRING
        assert shape_of(1) is ValueShape.INTEGER
        assert shape_of(1.0) is ValueShape.FLOAT
        assert shape_of(Moment(session_id="s", input_hash="1", vtime=0.0)) is ValueShape.MOMENT
        with pytest.raises(TypeError):
            shape_of(True)


class TestMomentFromMapping:
    def test_ignores_unknown_fields(self) -> None:
        moment = Moment.from_mapping({"session_id": "s", "input_hash": "9", "vtime": 2, "extra": [1]})
        assert moment == Moment(session_id="s", input_hash="9", vtime=2.0)

    def test_numeric_input_hash_keeps_literal(self) -> None:
        moment = Moment.from_mapping({"session_id": "s", "input_hash": 6057726200491963783, "vtime": Decimal("1.25")})
        assert moment.input_hash == "6057726200491963783"
        assert moment.vtime == 1.25

    def test_float_input_hash_rejected(self) -> None:
        with pytest.raises(ParseError, match="input_hash"):
            Moment.from_mapping({"session_id": "s", "input_hash": 1.5, "vtime": 1})

    def test_missing_fields_listed(self) -> None:
        with pytest.raises(ParseError, match="input_hash, vtime"):
            Moment.from_mapping({"session_id": "s"})

    def test_bool_vtime_rejected(self) -> None:
        with pytest.raises(ParseError, match="vtime"):
            Moment.from_mapping({"session_id": "s", "input_hash": "1", "vtime": True})

    def test_number_literal_input_hash_kept_verbatim(self) -> None:
        moment = Moment.from_mapping({"session_id": "s", "input_hash": NumberLiteral("1.5e3"), "vtime": NumberLiteral("2")})
        assert moment.input_hash == "1.5e3"
        assert moment.vtime == 2.0

    def test_number_literal_session_id_rejected(self) -> None:
        with pytest.raises(ParseError, match="session_id"):
            Moment.from_mapping({"session_id": NumberLiteral("7"), "input_hash": "1", "vtime": 1})


class TestNumberLiteral:
    @pytest.mark.parametrize("text", ["7", "-7", "+7", "0x1F", "0X1f"])
    def test_integral(self, text: str) -> None:
        assert NumberLiteral(text).is_integral

    @pytest.mark.parametrize("text", ["1.5", "1e5", "Infinity", "NaN", ".5"])
    def test_not_integral(self, text: str) -> None:
        assert not NumberLiteral(text).is_integral


class TestCredentials:
    def test_immutable(self) -> None:
        creds = Credentials(username="u", password="p", tenant="t")
        with pytest.raises(PydanticValidationError):
            creds.username = "other"  # type: ignore[misc]

    def test_password_not_in_repr(self) -> None:
        creds = Credentials(username="u", password="hunter2", tenant="t")
        assert "hunter2" not in repr(creds)
