"""Typed result shapes for hub commands.

Each model exposes ``from_dict`` so it can be passed as ``result_type`` to the
session helpers; shape problems raise ``KeyError``/``TypeError``/``ValueError``
which the codec reports as ``NeoHubPayloadError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FIRMWARE_COMMAND = "FIRMWARE"
FIRMWARE_VERSION_FIELD = "firmware version"

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@dataclass(frozen=True)
class Identity:
    """Hub identity derived from the FIRMWARE diagnostic command.

    Attributes:
        device_id: Hub hardware identifier (MAC-address-like).
        firmware_version: Firmware version, or None when the hub omits it.
    """

    device_id: str
    firmware_version: str | None = None

    @classmethod
    def from_firmware_response(cls, device_id: str, payload: Any) -> Identity:
        """Build an identity from a decoded FIRMWARE result.

        The version is optional enrichment: a missing or non-string field
        yields ``firmware_version=None``.
        """
        version = None
        if isinstance(payload, dict):
            value = payload.get(FIRMWARE_VERSION_FIELD)
            if isinstance(value, str):
                version = value
        return cls(device_id=device_id, firmware_version=version)


def _require_dict(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _require_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{what} out of range: {value}")
    return value


def _comfort_slot(value: Any, what: str) -> tuple[Any, ...]:
    if not isinstance(value, list):
        raise TypeError(f"{what} must be a list, got {type(value).__name__}")
    if len(value) != 4:
        raise ValueError(f"{what} must hold 4 entries, got {len(value)}")
    return tuple(value)


@dataclass(frozen=True)
class ProfileInfoDay:
    """Comfort levels for one day: each slot is ``[time, temp, ...]`` (4 entries)."""

    wake: tuple[Any, ...]
    leave: tuple[Any, ...]
    ret: tuple[Any, ...]
    sleep: tuple[Any, ...]

    @classmethod
    def from_dict(cls, data: Any) -> ProfileInfoDay:
        data = _require_dict(data, "profile day")
        return cls(
            wake=_comfort_slot(data["wake"], "wake"),
            leave=_comfort_slot(data["leave"], "leave"),
            ret=_comfort_slot(data["return"], "return"),
            sleep=_comfort_slot(data["sleep"], "sleep"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "wake": list(self.wake),
            "leave": list(self.leave),
            "return": list(self.ret),
            "sleep": list(self.sleep),
        }


@dataclass(frozen=True)
class ProfileInfo:
    """Weekly schedule, keyed by lower-case weekday name."""

    monday: ProfileInfoDay
    tuesday: ProfileInfoDay
    wednesday: ProfileInfoDay
    thursday: ProfileInfoDay
    friday: ProfileInfoDay
    saturday: ProfileInfoDay
    sunday: ProfileInfoDay

    @classmethod
    def from_dict(cls, data: Any) -> ProfileInfo:
        data = _require_dict(data, "profile info")
        days = {day: ProfileInfoDay.from_dict(data[day]) for day in WEEKDAYS}
        return cls(**days)

    def to_dict(self) -> dict[str, Any]:
        return {day: getattr(self, day).to_dict() for day in WEEKDAYS}


@dataclass(frozen=True)
class Profile:
    """Stored heating profile as returned by the hub.

    Attributes:
        profile_id: Hub-assigned id, starting at 1.
        p_type: Profile type (0 for the standard weekly profile).
        info: Weekly schedule.
        name: User-facing profile name.
    """

    profile_id: int
    p_type: int
    info: ProfileInfo
    name: str

    @classmethod
    def from_dict(cls, data: Any) -> Profile:
        data = _require_dict(data, "profile")
        name = data["name"]
        if not isinstance(name, str):
            raise TypeError(f"name must be a string, got {type(name).__name__}")
        return cls(
            profile_id=_require_int(data["PROFILE_ID"], "PROFILE_ID"),
            p_type=_require_int(data["P_TYPE"], "P_TYPE"),
            info=ProfileInfo.from_dict(data["info"]),
            name=name,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "PROFILE_ID": self.profile_id,
            "P_TYPE": self.p_type,
            "info": self.info.to_dict(),
            "name": self.name,
        }
