"""Tests for outbound command serialization and inbound message decoding."""

import json

import pytest

from sbtc.errors import DecodeError, EncodingError, SerializationError
from sbtc.protocol.messages import (
    Diagnostic,
    LogMessage,
    OutboundCommand,
    Response,
    build_command,
    decode_message,
    parse_message,
)


class TestOutboundCommand:
    """Tests for the sbt/exec request."""

    def test_compile_wire_form(self):
        command = build_command(["compile"])
        assert command.to_json() == (
            '{"jsonrpc":"2.0","id":1,"method":"sbt/exec",'
            '"params":{"commandLine":"compile"}}'
        )

    def test_args_are_joined_with_spaces(self):
        command = build_command(["testOnly", "*FooSpec", "--", "-z", "bar"])
        assert command.command_line == "testOnly *FooSpec -- -z bar"

    def test_no_args_gives_empty_command_line(self):
        assert build_command([]).command_line == ""

    def test_defaults(self):
        command = OutboundCommand(command_line="test")
        assert command.id == 1
        assert command.method == "sbt/exec"
        assert command.jsonrpc == "2.0"

    def test_non_ascii_is_kept_verbatim(self):
        command = build_command(['set name := "café"'])
        assert "café" in command.to_json()
        assert json.loads(command.to_json())["params"]["commandLine"] == (
            'set name := "café"'
        )

    def test_is_immutable(self):
        command = build_command(["compile"])
        with pytest.raises(AttributeError):
            command.id = 2  # type: ignore[misc]

    def test_unserializable_command_line(self):
        command = OutboundCommand(command_line=object())  # type: ignore[arg-type]
        with pytest.raises(SerializationError) as exc_info:
            command.to_json()
        assert "Failed to serialize command to JSON" in str(exc_info.value)


class TestDecodeMessage:
    """Tests for shape-based message decoding."""

    def test_log_message(self):
        message = decode_message(
            b'{"jsonrpc":"2.0","method":"window/logMessage",'
            b'"params":{"type":3,"message":"Compiling..."}}'
        )
        assert isinstance(message, LogMessage)
        assert message.method == "window/logMessage"
        assert message.level == 3
        assert message.text == "Compiling..."

    def test_response(self):
        message = decode_message(
            b'{"jsonrpc":"2.0","id":1,"result":{"status":"done","exitCode":0}}'
        )
        assert isinstance(message, Response)
        assert message.id == 1
        assert message.status == "done"
        assert message.exit_code == 0

    def test_diagnostic(self):
        payload = {
            "jsonrpc": "2.0",
            "method": "textDocument/publishDiagnostics",
            "params": {
                "uri": "file:///src/main/scala/Foo.scala",
                "diagnostics": [
                    {
                        "range": {
                            "start": {"line": 3, "character": 4},
                            "end": {"line": 3, "character": 9},
                        },
                        "severity": 1,
                        "message": "not found: value fooo",
                    }
                ],
            },
        }
        message = decode_message(json.dumps(payload).encode())
        assert isinstance(message, Diagnostic)
        assert message.params.uri == "file:///src/main/scala/Foo.scala"
        assert len(message.params.diagnostics) == 1

    def test_response_shape_takes_priority(self):
        message = parse_message(
            '{"id":1,"result":{"status":"done","exitCode":0},'
            '"method":"window/logMessage","params":{"type":1,"message":"x"}}'
        )
        assert isinstance(message, Response)

    def test_response_with_string_id_is_not_a_response(self):
        with pytest.raises(DecodeError):
            parse_message('{"id":"1","result":{"status":"done","exitCode":0}}')

    def test_log_message_requires_integer_type(self):
        with pytest.raises(DecodeError):
            parse_message('{"method":"m","params":{"type":"3","message":"x"}}')

    def test_unknown_shape_includes_text(self):
        raw = '{"jsonrpc":"2.0","method":"build/taskStart","params":{"taskId":{}}}'
        with pytest.raises(DecodeError) as exc_info:
            parse_message(raw)
        assert raw in str(exc_info.value)
        assert "Failed to deserialize message from JSON" in str(exc_info.value)

    def test_error_response_is_unrecognized(self):
        raw = '{"jsonrpc":"2.0","id":1,"error":{"code":-32601,"message":"nope"}}'
        with pytest.raises(DecodeError) as exc_info:
            parse_message(raw)
        assert raw in str(exc_info.value)

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", "42", "null", ""])
    def test_non_object_payloads(self, raw):
        with pytest.raises(DecodeError) as exc_info:
            parse_message(raw)
        assert f"'{raw}'" in str(exc_info.value)

    def test_invalid_utf8(self):
        with pytest.raises(EncodingError) as exc_info:
            decode_message(b'{"id":1,"result":"\xff"}')
        assert "Failed to decode message as UTF-8 string" in str(exc_info.value)

    def test_deeply_nested_json(self):
        payload = b"[" * 200_000 + b"]" * 200_000
        with pytest.raises(DecodeError) as exc_info:
            decode_message(payload)
        assert str(exc_info.value).startswith("Failed to deserialize message from JSON")
