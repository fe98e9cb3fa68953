"""A small in-memory model of the account runtime the vault program runs on."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass, field

from pwvault.errors import ProgramError

PUBKEY_BYTES = 32
MAX_SEEDS = 16
MAX_SEED_LEN = 32
PDA_MARKER = b"ProgramDerivedAddress"
ACCOUNT_STORAGE_OVERHEAD = 128

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

# Curve25519 field parameters used to test whether 32 bytes decode to a point.
_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P


@dataclass(frozen=True, order=True)
class Pubkey:
    """A 32-byte account address."""

    raw: bytes

    def __post_init__(self) -> None:
        raw = bytes(self.raw)
        if len(raw) != PUBKEY_BYTES:
            raise ValueError(f"a public key is {PUBKEY_BYTES} bytes, got {len(raw)}")
        object.__setattr__(self, "raw", raw)

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        number = int.from_bytes(self.raw, "big")
        digits = []
        while number:
            number, remainder = divmod(number, 58)
            digits.append(_BASE58_ALPHABET[remainder])
        zeros = len(self.raw) - len(self.raw.lstrip(b"\0"))
        return "1" * zeros + "".join(reversed(digits))


SYSTEM_PROGRAM_ID = Pubkey(bytes(PUBKEY_BYTES))


@dataclass(eq=False)
class AccountInfo:
    """An account as seen by the program: address, balance, data and owner."""

    key: Pubkey
    lamports: int = 0
    data: bytearray = field(default_factory=bytearray)
    owner: Pubkey = SYSTEM_PROGRAM_ID
    is_signer: bool = False
    is_writable: bool = True

    def __post_init__(self) -> None:
        self.data = bytearray(self.data)

    def data_is_empty(self) -> bool:
        return not self.data

    def realloc(self, new_size: int) -> None:
        """Resize the account data, zero-filling any new bytes."""
        if new_size < 0:
            raise ProgramError("invalid realloc size")
        current = len(self.data)
        if new_size <= current:
            del self.data[new_size:]
        else:
            self.data.extend(bytes(new_size - current))


@dataclass(frozen=True)
class Rent:
    """Rent parameters deciding the balance an account needs to be rent exempt."""

    lamports_per_byte_year: int = 3480
    exemption_threshold: float = 2.0
    burn_percent: int = 50

    def minimum_balance(self, data_len: int) -> int:
        bytes_total = ACCOUNT_STORAGE_OVERHEAD + data_len
        return int(float(bytes_total * self.lamports_per_byte_year) * self.exemption_threshold)


def is_on_curve(data: bytes) -> bool:
    """Whether the bytes decompress to a point on the ed25519 curve."""
    raw = bytes(data)
    if len(raw) != PUBKEY_BYTES:
        return False
    y = (int.from_bytes(raw, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    u = (y2 - 1) % _P
    v = (_D * y2 + 1) % _P
    v3 = v * v % _P * v % _P
    v7 = v3 * v3 % _P * v % _P
    x = u * v3 % _P * pow(u * v7 % _P, (_P - 5) // 8, _P) % _P
    check = v * x % _P * x % _P
    return check == u or check == (-u) % _P


def create_program_address(seeds: Iterable[bytes], program_id: Pubkey) -> Pubkey:
    """Derive a program address from seeds; raise if it lands on the curve."""
    seed_list = [bytes(seed) for seed in seeds]
    if len(seed_list) > MAX_SEEDS:
        raise ProgramError("max seed length exceeded")
    if any(len(seed) > MAX_SEED_LEN for seed in seed_list):
        raise ProgramError("max seed length exceeded")
    hasher = hashlib.sha256()
    for seed in seed_list:
        hasher.update(seed)
    hasher.update(bytes(program_id))
    hasher.update(PDA_MARKER)
    digest = hasher.digest()
    if is_on_curve(digest):
        raise ProgramError("invalid seeds, address must fall off the curve")
    return Pubkey(digest)


def find_program_address(seeds: Iterable[bytes], program_id: Pubkey) -> tuple[Pubkey, int]:
    """Find the first valid program address, trying bump seeds from 255 down."""
    seed_list = [bytes(seed) for seed in seeds]
    for bump in range(255, 0, -1):
        try:
            return create_program_address([*seed_list, bytes([bump])], program_id), bump
        except ProgramError as exc:
            if "max seed length" in str(exc):
                raise
    raise ProgramError("unable to find a viable program address bump seed")


def create_account(
    payer: AccountInfo, new_account: AccountInfo, lamports: int, space: int, owner: Pubkey
) -> None:
    """Fund and allocate a fresh account and assign it to an owner.

    The new account's own signature is taken as given; the caller vouches for it.
    """
    if not payer.is_signer:
        raise ProgramError("missing required signature")
    if new_account.lamports > 0 or not new_account.data_is_empty():
        raise ProgramError("account already in use")
    if payer.lamports < lamports:
        raise ProgramError("insufficient funds")
    payer.lamports -= lamports
    new_account.lamports += lamports
    new_account.data = bytearray(space)
    new_account.owner = owner


def transfer(source: AccountInfo, destination: AccountInfo, lamports: int) -> None:
    """Move lamports from a signing, data-free account to another account."""
    if not source.is_signer:
        raise ProgramError("missing required signature")
    if not source.data_is_empty():
        raise ProgramError("transfer: source must not carry data")
    if source.lamports < lamports:
        raise ProgramError("insufficient funds")
    source.lamports -= lamports
    destination.lamports += lamports