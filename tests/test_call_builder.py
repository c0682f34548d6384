"""Tests for binary call construction."""

import base64
import struct

import pytest

from mcpsol.client import CallAccount, build_call, decode_pubkey, encode_arg, parse_schema
from mcpsol.encoding import encode_compact, encode_page
from mcpsol.errors import InvalidArgError, InvalidPubkeyError, MissingParamError, ToolNotFoundError
from mcpsol.schema import ArgType, SchemaBuilder, ToolBuilder


@pytest.fixture
def compact_counter(counter_schema):
    return parse_schema(encode_compact(counter_schema))


@pytest.fixture
def counter_accounts(counter_address, authority_address):
    return {"counter": counter_address, "authority": authority_address}


@pytest.fixture
def compact_assign():
    schema = (
        SchemaBuilder("registry")
        .add_tool(ToolBuilder("assign").signer("admin").arg("owner", ArgType.PUBKEY).arg("slot", ArgType.U8))
        .build()
    )
    return parse_schema(encode_compact(schema))


class TestBuildCall:
    def test_increment_example(
        self, compact_counter, counter_schema, counter_accounts, program_id, counter_address, authority_address
    ):
        call = build_call(compact_counter, program_id, "increment", counter_accounts, {"amount": "100"})
        discriminator = counter_schema.get_tool("increment").discriminator
        assert call.target_id == program_id
        assert call.data == discriminator + (100).to_bytes(8, "little")
        assert call.accounts == [
            CallAccount(counter_address, is_signer=False, is_writable=True),
            CallAccount(authority_address, is_signer=True, is_writable=False),
        ]
        assert call.data_base64 == base64.b64encode(call.data).decode("ascii")

    def test_accounts_by_suffixed_name(self, compact_counter, program_id, counter_address, authority_address):
        call = build_call(
            compact_counter,
            program_id,
            "increment",
            {"counter_w": counter_address, "authority_s": authority_address},
            {"amount": 1},
        )
        assert [a.address for a in call.accounts] == [counter_address, authority_address]

    def test_signer_writable_account(self, compact_counter, counter_accounts, program_id, counter_address):
        call = build_call(compact_counter, program_id, "initialize", counter_accounts, {})
        assert call.accounts[0] == CallAccount(counter_address, True, True)
        assert len(call.data) == 8

    def test_tool_without_params(self, compact_counter, program_id):
        call = build_call(compact_counter, program_id, "list_tools", {}, {})
        assert call.data.hex() == "42195e6a55fd41c0"
        assert call.accounts == []

    def test_paginated_schema_gives_same_call(self, counter_schema, compact_counter, counter_accounts, program_id):
        page = parse_schema(encode_page(counter_schema, 2))
        from_page = build_call(page, program_id, "increment", counter_accounts, {"amount": "7"})
        from_compact = build_call(compact_counter, program_id, "increment", counter_accounts, {"amount": "7"})
        assert from_page == from_compact

    def test_unknown_tool(self, compact_counter, program_id):
        with pytest.raises(ToolNotFoundError):
            build_call(compact_counter, program_id, "withdraw", {}, {})

    def test_missing_account(self, compact_counter, program_id, counter_address):
        with pytest.raises(MissingParamError) as excinfo:
            build_call(compact_counter, program_id, "increment", {"counter": counter_address}, {"amount": "1"})
        assert excinfo.value.param == "authority_s"

    def test_missing_arg(self, compact_counter, counter_accounts, program_id):
        with pytest.raises(MissingParamError) as excinfo:
            build_call(compact_counter, program_id, "increment", counter_accounts, {})
        assert excinfo.value.param == "amount"

    def test_invalid_account_address(self, compact_counter, program_id, authority_address):
        with pytest.raises(InvalidPubkeyError):
            build_call(
                compact_counter,
                program_id,
                "increment",
                {"counter": "not-a-key!", "authority": authority_address},
                {"amount": "1"},
            )

    def test_out_of_range_amount(self, compact_counter, counter_accounts, program_id):
        with pytest.raises(InvalidArgError):
            build_call(compact_counter, program_id, "increment", counter_accounts, {"amount": "-1"})


class TestPubkeyArguments:
    def test_given_as_account(self, compact_assign, program_id, authority_address, counter_address):
        call = build_call(
            compact_assign,
            program_id,
            "assign",
            {"admin": authority_address, "owner": counter_address},
            {"slot": "3"},
        )
        assert call.accounts[1] == CallAccount(counter_address, is_signer=False, is_writable=False)
        assert call.data[8:] == b"\x03"

    def test_given_as_arg(self, compact_assign, program_id, authority_address, counter_address):
        call = build_call(
            compact_assign,
            program_id,
            "assign",
            {"admin": authority_address},
            {"owner": counter_address, "slot": "3"},
        )
        assert [a.address for a in call.accounts] == [authority_address, counter_address]
        assert call.data[8:] == b"\x03"

    def test_missing_everywhere(self, compact_assign, program_id, authority_address):
        with pytest.raises(MissingParamError) as excinfo:
            build_call(compact_assign, program_id, "assign", {"admin": authority_address}, {"slot": "3"})
        assert excinfo.value.param == "owner"


class TestEncodeArg:
    @pytest.mark.parametrize(
        "type_name,value,expected",
        [
            ("u8", "255", b"\xff"),
            ("u16", "258", b"\x02\x01"),
            ("u32", "1", b"\x01\x00\x00\x00"),
            ("u64", "100", (100).to_bytes(8, "little")),
            ("u128", "1", (1).to_bytes(16, "little")),
            ("i8", "-1", b"\xff"),
            ("i16", "-2", (-2).to_bytes(2, "little", signed=True)),
            ("i64", "-100", (-100).to_bytes(8, "little", signed=True)),
            ("i128", "+5", (5).to_bytes(16, "little", signed=True)),
            ("int", "7", (7).to_bytes(8, "little")),
        ],
    )
    def test_integers(self, type_name, value, expected):
        assert encode_arg(type_name, value, "x") == expected

    @pytest.mark.parametrize(
        "type_name,value",
        [
            ("u8", "256"),
            ("u8", "-1"),
            ("i8", "128"),
            ("u64", "abc"),
            ("u64", "1.5"),
            ("u64", ""),
            ("u64", "9" * 5000),
        ],
    )
    def test_invalid_integers(self, type_name, value):
        with pytest.raises(InvalidArgError):
            encode_arg(type_name, value, "x")

    @pytest.mark.parametrize("value,expected", [("true", b"\x01"), ("FALSE", b"\x00"), (True, b"\x01")])
    def test_bool(self, value, expected):
        assert encode_arg("bool", value, "flag") == expected

    def test_invalid_bool(self):
        with pytest.raises(InvalidArgError):
            encode_arg("bool", "yes", "flag")

    def test_string_is_length_prefixed(self):
        assert encode_arg("str", "hi", "label") == struct.pack("<I", 2) + b"hi"
        assert encode_arg("string", "é", "label") == struct.pack("<I", 2) + "é".encode("utf-8")

    def test_unknown_type_falls_back_to_string(self):
        assert encode_arg("MyStruct", "abc", "x") == struct.pack("<I", 3) + b"abc"

    def test_bytes_from_base64(self):
        assert encode_arg("bytes", base64.b64encode(b"\x00\x01").decode(), "blob") == (
            struct.pack("<I", 2) + b"\x00\x01"
        )

    def test_invalid_base64(self):
        with pytest.raises(InvalidArgError):
            encode_arg("bytes", "***", "blob")

    def test_pubkey(self, system_program):
        assert encode_arg("pubkey", system_program, "owner") == bytes(32)


class TestDecodePubkey:
    def test_valid(self, counter_address, system_program):
        assert decode_pubkey(system_program, "p") == bytes(32)
        assert len(decode_pubkey(counter_address, "p")) == 32

    @pytest.mark.parametrize("value", ["", "abc", "0OIl", "not-a-key!"])
    def test_invalid(self, value):
        with pytest.raises(InvalidPubkeyError):
            decode_pubkey(value, "p")


def test_huge_integer_text_is_a_typed_error():
    with pytest.raises(InvalidArgError) as excinfo:
        encode_arg("u128", "1" * 41, "amount")
    assert excinfo.value.param == "amount"
