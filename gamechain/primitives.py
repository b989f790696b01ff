"""Basic chain value types and range checks."""

from __future__ import annotations

from dataclasses import dataclass

BlockNumber = int
Balance = int
AssetId = int
Index = int
Moment = int

ACCOUNT_ID_LENGTH = 32
MAX_BLOCK_NUMBER = 2**32 - 1
MAX_BALANCE = 2**128 - 1


@dataclass(frozen=True)
class AccountId:
    """A 32-byte account identifier."""

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)):
            raise TypeError("account id must be bytes")
        if len(self.raw) != ACCOUNT_ID_LENGTH:
            raise ValueError(
                f"account id must be {ACCOUNT_ID_LENGTH} bytes, got {len(self.raw)}"
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    @staticmethod
    def from_hex(text: str) -> "AccountId":
        """Parse a hex string, with or without a ``0x`` prefix."""
        if text.startswith(("0x", "0X")):
            text = text[2:]
        return AccountId(bytes.fromhex(text))

    def to_hex(self) -> str:
        """Render as a ``0x``-prefixed lower-case hex string."""
        return "0x" + self.raw.hex()


def _check_range(value: int, upper: int, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an integer")
    if not 0 <= value <= upper:
        raise ValueError(f"{name} {value} out of range 0..={upper}")
    return value


def check_block_number(value: int) -> int:
    """Return ``value`` if it is a valid 32-bit block number."""
    return _check_range(value, MAX_BLOCK_NUMBER, "block number")


def check_balance(value: int) -> int:
    """Return ``value`` if it is a valid 128-bit balance."""
    return _check_range(value, MAX_BALANCE, "balance")