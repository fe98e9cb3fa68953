"""Instruction variants and decoding of raw instruction data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pwvault.errors import ErrorCode, ProgramError, VaultError

MAX_BLOB_SIZE = 64
INDEX_SIZE = 4
NAME_SIZE = 32


@dataclass(frozen=True)
class InitUserAccount:
    """Create the caller's user account."""


@dataclass(frozen=True)
class InitVaultAccount:
    """Create a named vault for the caller."""

    vault_name: str


@dataclass(frozen=True)
class InitAddInVault:
    """Append a 64-byte credential entry to a vault."""

    vault_name: str
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _blob(self.data))


@dataclass(frozen=True)
class EditVaultAccount:
    """Replace (delete == 0) or remove the entry at index in a vault."""

    data: bytes
    vault_name: str
    index: int
    delete: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _blob(self.data))


Instruction = Union[InitUserAccount, InitVaultAccount, InitAddInVault, EditVaultAccount]


def _blob(value: bytes) -> bytes:
    raw = bytes(value)
    if len(raw) != MAX_BLOB_SIZE:
        raise ValueError(f"data must be exactly {MAX_BLOB_SIZE} bytes, got {len(raw)}")
    return raw


def _utf8(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProgramError("invalid instruction data") from exc


def unpack(data: bytes) -> Instruction:
    """Decode instruction data: a tag byte followed by the variant's fields."""
    data = bytes(data)
    if not data:
        raise VaultError(ErrorCode.DATA_UNPACK_ERROR, "empty instruction data")
    tag, rest = data[0], data[1:]

    if tag == 0:
        return InitUserAccount()
    if tag == 1:
        return InitVaultAccount(vault_name=_utf8(rest))
    if tag == 2:
        blob, rest = unpack_data(rest)
        return InitAddInVault(vault_name=_utf8(rest), data=blob)
    if tag == 3:
        if not rest:
            raise VaultError(ErrorCode.DATA_UNPACK_ERROR, "missing delete flag")
        delete, rest = rest[0], rest[1:]
        index, rest = unpack_index(rest)
        blob, rest = unpack_data(rest)
        return EditVaultAccount(data=blob, vault_name=_utf8(rest), index=index, delete=delete)
    raise VaultError(ErrorCode.INVALID_INSTRUCTION, f"unknown instruction tag {tag}")


def unpack_data(data: bytes) -> tuple[bytes, bytes]:
    """Split a 64-byte data blob off the front of the input."""
    data = bytes(data)
    if len(data) < MAX_BLOB_SIZE:
        raise VaultError(ErrorCode.DATA_UNPACK_ERROR, "input too short for data blob")
    return data[:MAX_BLOB_SIZE], data[MAX_BLOB_SIZE:]


def unpack_name(data: bytes) -> tuple[str, bytes]:
    """Split a zero-padded 32-byte name off the front of the input."""
    data = bytes(data)
    if len(data) < NAME_SIZE:
        raise VaultError(ErrorCode.DATA_UNPACK_ERROR, "input too short for vault name")
    raw, rest = data[:NAME_SIZE], data[NAME_SIZE:]
    raw = raw.split(b"\0", 1)[0]
    try:
        name = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise VaultError(
            ErrorCode.DATA_UNPACK_ERROR, f"invalid UTF-8 in vault name: {exc}"
        ) from exc
    return name, rest


def unpack_index(data: bytes) -> tuple[int, bytes]:
    """Split a little-endian u32 index off the front of the input."""
    data = bytes(data)
    if len(data) < INDEX_SIZE:
        raise VaultError(ErrorCode.DATA_UNPACK_ERROR, "input too short for index")
    return int.from_bytes(data[:INDEX_SIZE], "little"), data[INDEX_SIZE:]