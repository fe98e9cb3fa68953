"""Account state layouts and their binary encoding."""

from __future__ import annotations

from dataclasses import dataclass, field

from pwvault.errors import ProgramError

PUBKEY_LEN = 32
NAME_LEN = 32
CREDENTIAL_PART_LEN = 32


def _fixed(value: object, size: int, what: str) -> bytes:
    if isinstance(value, int):
        raise TypeError(f"{what} must be bytes, not int")
    raw = bytes(value)  # type: ignore[arg-type]
    if len(raw) != size:
        raise ValueError(f"{what} must be exactly {size} bytes, got {len(raw)}")
    return raw


def _encode_u32(value: int) -> bytes:
    return value.to_bytes(4, "little")


class _Reader:
    """Sequential reader over encoded account data."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise ProgramError("unexpected end of data while decoding")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def u32(self) -> int:
        return int.from_bytes(self.take(4), "little")

    def finish(self) -> None:
        if self._pos != len(self._data):
            raise ProgramError("not all bytes read while decoding")


@dataclass(frozen=True)
class Credentials:
    """One encrypted credential entry: a field and its passkey."""

    field: bytes
    passkey: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "field", _fixed(self.field, CREDENTIAL_PART_LEN, "field"))
        object.__setattr__(
            self, "passkey", _fixed(self.passkey, CREDENTIAL_PART_LEN, "passkey")
        )

    def to_bytes(self) -> bytes:
        return self.field + self.passkey

    @classmethod
    def _read(cls, reader: _Reader) -> Credentials:
        return cls(reader.take(CREDENTIAL_PART_LEN), reader.take(CREDENTIAL_PART_LEN))

    @classmethod
    def from_bytes(cls, data: bytes) -> Credentials:
        reader = _Reader(data)
        result = cls._read(reader)
        reader.finish()
        return result


@dataclass
class VaultAccount:
    """A named vault holding credential entries for one user account."""

    name: bytes
    user_account: bytes
    data: list[Credentials] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.name = _fixed(self.name, NAME_LEN, "name")
        self.user_account = _fixed(self.user_account, PUBKEY_LEN, "user_account")
        self.data = list(self.data)

    def to_bytes(self) -> bytes:
        entries = b"".join(entry.to_bytes() for entry in self.data)
        return self.name + self.user_account + _encode_u32(len(self.data)) + entries

    @classmethod
    def from_bytes(cls, data: bytes) -> VaultAccount:
        reader = _Reader(data)
        name = reader.take(NAME_LEN)
        user_account = reader.take(PUBKEY_LEN)
        count = reader.u32()
        entries = [Credentials._read(reader) for _ in range(count)]
        reader.finish()
        return cls(name, user_account, entries)


@dataclass
class UserAccount:
    """A user's record listing the addresses of the vaults they own."""

    user_address: bytes
    vaults: list[bytes] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.user_address = _fixed(self.user_address, PUBKEY_LEN, "user_address")
        self.vaults = [_fixed(vault, PUBKEY_LEN, "vault address") for vault in self.vaults]

    def to_bytes(self) -> bytes:
        return self.user_address + _encode_u32(len(self.vaults)) + b"".join(self.vaults)

    @classmethod
    def from_bytes(cls, data: bytes) -> UserAccount:
        reader = _Reader(data)
        user_address = reader.take(PUBKEY_LEN)
        count = reader.u32()
        vaults = [reader.take(PUBKEY_LEN) for _ in range(count)]
        reader.finish()
        return cls(user_address, vaults)