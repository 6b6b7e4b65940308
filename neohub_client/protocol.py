"""Envelope codec for the NeoHub command-queue protocol.

Outbound frames wrap the command list twice: the inner message
``{"token": ..., "COMMANDS": [...]}`` is serialized to text first, and that
text becomes the string value of ``message`` in the outer
``hm_get_command_queue`` object. Replies mirror this: the command result sits
JSON-encoded inside the ``response`` string of an ``hm_set_command_response``
object. Both passes must stay separate; embedding the inner object as
structured JSON changes the wire format and hubs reject it.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .errors import NeoHubPayloadError, NeoHubProtocolError

T = TypeVar("T")

COMMAND_QUEUE_TYPE = "hm_get_command_queue"
COMMAND_RESPONSE_TYPE = "hm_set_command_response"

# Only one command is ever in flight per connection, so the tag is constant.
COMMAND_ID = 1


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def build_void_command(name: str) -> str:
    """Build the command text for a command without an argument.

    >>> build_void_command("AWAY_ON")
    '{"AWAY_ON":0}'
    """
    return _to_json({name: 0})


def build_string_command(name: str, argument: str) -> str:
    """Build the command text for a command taking one string argument.

    The text is produced by the JSON encoder, so quotes or backslashes in
    ``argument`` are escaped rather than breaking the command.
    """
    return _to_json({name: argument})


def encode_command_message(
    token: str, command: str, *, command_id: int = COMMAND_ID
) -> str:
    """Serialize the inner message carrying the token and one command."""
    return _to_json(
        {
            "token": token,
            "COMMANDS": [{"COMMAND": command, "COMMANDID": command_id}],
        }
    )


def build_command_frame(
    token: str, command: str, *, command_id: int = COMMAND_ID
) -> str:
    """Build the complete outbound text frame for one command.

    Args:
        token: Hub API token.
        command: Command text, either a bare name such as ``"FIRMWARE"`` or
            the output of ``build_void_command``/``build_string_command``.
        command_id: Correlation tag echoed back by the hub.

    Returns:
        Text frame ready to send over the websocket.
    """
    inner = encode_command_message(token, command, command_id=command_id)
    return _to_json({"message_type": COMMAND_QUEUE_TYPE, "message": inner})


@dataclass(frozen=True)
class CommandRequest:
    """Decoded form of an outbound command message."""

    token: str
    command: str
    command_id: int


@dataclass(frozen=True)
class CommandResponse:
    """Validated reply envelope.

    Attributes:
        command_id: Correlation tag, always ``COMMAND_ID`` once validated.
        device_id: Hub hardware identifier (MAC-address-like).
        message_type: ``hm_set_command_response``.
        response: Command result, still JSON-encoded.
    """

    command_id: int
    device_id: str
    message_type: str
    response: str


def _load_object(text: str | bytes, what: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise NeoHubProtocolError(f"{what} is not valid JSON", text) from err
    if not isinstance(data, dict):
        raise NeoHubProtocolError(f"{what} is not a JSON object", text)
    return data


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def decode_command_message(text: str) -> CommandRequest:
    """Parse an inner command message back into its parts.

    Raises:
        NeoHubProtocolError: If the message does not hold exactly one
            well-formed command.
    """
    data = _load_object(text, "Command message")
    token = data.get("token")
    commands = data.get("COMMANDS")
    if not isinstance(token, str) or not isinstance(commands, list):
        raise NeoHubProtocolError("Command message lacks token or COMMANDS", data)
    if len(commands) != 1 or not isinstance(commands[0], dict):
        raise NeoHubProtocolError("Command message must hold one command", data)

    entry = commands[0]
    command = entry.get("COMMAND")
    command_id = entry.get("COMMANDID")
    if not isinstance(command, str) or not _is_int(command_id):
        raise NeoHubProtocolError("Malformed command entry", entry)
    return CommandRequest(token=token, command=command, command_id=command_id)


def decode_command_frame(text: str | bytes) -> CommandRequest:
    """Parse a complete outbound frame, unwrapping both JSON layers."""
    data = _load_object(text, "Command frame")
    if data.get("message_type") != COMMAND_QUEUE_TYPE:
        raise NeoHubProtocolError("Unexpected command frame type", data)
    message = data.get("message")
    if not isinstance(message, str):
        raise NeoHubProtocolError("Command frame message is not a string", data)
    return decode_command_message(message)


def build_command_response(
    device_id: str, response: Any, *, command_id: int = COMMAND_ID
) -> str:
    """Build a reply frame as the hub sends it.

    ``response`` is JSON-encoded into the ``response`` string. Used to
    emulate a hub in tests and local tooling.
    """
    return _to_json(
        {
            "command_id": command_id,
            "device_id": device_id,
            "message_type": COMMAND_RESPONSE_TYPE,
            "response": _to_json(response),
        }
    )


def parse_command_response(
    text: str | bytes, *, expected_id: int = COMMAND_ID
) -> CommandResponse:
    """Parse and validate a reply frame.

    The message type is checked before the command id, so a foreign message
    is reported as such whatever id it carries.

    Raises:
        NeoHubProtocolError: If the frame is not JSON, has the wrong
            ``message_type``, a ``command_id`` other than ``expected_id``,
            or missing fields. ``payload`` holds the offending frame.
    """
    data = _load_object(text, "Reply")

    message_type = data.get("message_type")
    if message_type != COMMAND_RESPONSE_TYPE:
        raise NeoHubProtocolError(f"Unexpected reply type {message_type!r}", data)

    command_id = data.get("command_id")
    if not _is_int(command_id) or command_id != expected_id:
        raise NeoHubProtocolError(
            f"Reply command_id {command_id!r} does not match {expected_id}", data
        )

    device_id = data.get("device_id")
    response = data.get("response")
    if not isinstance(device_id, str) or not isinstance(response, str):
        raise NeoHubProtocolError("Reply lacks device_id or response", data)

    return CommandResponse(
        command_id=command_id,
        device_id=device_id,
        message_type=message_type,
        response=response,
    )


def decode_result(raw: str, result_type: Callable[[Any], T] | None = None) -> Any:
    """Decode a command result into the caller's shape.

    Args:
        raw: The still-encoded ``response`` text of a reply.
        result_type: Optional target. Classes exposing ``from_dict`` are
            built through it; any other callable receives the decoded JSON.
            When omitted the decoded JSON value is returned.

    Raises:
        NeoHubPayloadError: If ``raw`` is not JSON or does not fit the target.
    """
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as err:
        raise NeoHubPayloadError(f"Result is not valid JSON ({err.msg})", raw) from err

    if result_type is None:
        return value

    factory = getattr(result_type, "from_dict", result_type)
    try:
        return factory(value)
    except (KeyError, TypeError, ValueError) as err:
        name = getattr(result_type, "__name__", repr(result_type))
        raise NeoHubPayloadError(f"Result does not match {name} ({err})", raw) from err
