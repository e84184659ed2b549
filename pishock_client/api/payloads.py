"""Request bodies for the PiShock API and the op code/duration encodings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict

from pishock_client.core.errors import InvalidOpCodeError

OPERATE_PATH = "/apioperate/"
SHOCKER_INFO_PATH = "/GetShockerInfo"

MIN_DURATION_SECONDS = 0.1


class OpCode(IntEnum):
    SHOCK = 0
    VIBRATE = 1
    BEEP = 2

    @classmethod
    def parse(cls, value: int) -> "OpCode":
        try:
            return cls(value)
        except ValueError:
            raise InvalidOpCodeError(value) from None


def encode_duration(duration: float) -> int:
    """Encode a duration in seconds the way the operate endpoint expects.

    Whole seconds from 1s upwards, milliseconds below that; both truncated.
    """
    if duration >= 1:
        return int(duration)
    return int(duration * 1000)


@dataclass(frozen=True)
class Credentials:
    username: str
    api_key: str
    app_name: str


def operate_payload(
    credentials: Credentials,
    share_code: str,
    op_code: OpCode,
    intensity: int,
    duration: float,
) -> Dict[str, Any]:
    return {
        "Op": int(op_code),
        "Intensity": int(intensity),
        "Duration": encode_duration(duration),
        "Code": share_code,
        "Apikey": credentials.api_key,
        "Name": credentials.app_name,
        "Username": credentials.username,
    }


def shocker_info_payload(credentials: Credentials, share_code: str) -> Dict[str, Any]:
    return {
        "Apikey": credentials.api_key,
        "Username": credentials.username,
        "Code": share_code,
    }


__all__ = [
    "OPERATE_PATH",
    "SHOCKER_INFO_PATH",
    "MIN_DURATION_SECONDS",
    "OpCode",
    "Credentials",
    "encode_duration",
    "operate_payload",
    "shocker_info_payload",
]
