import pytest

from pwvault.errors import ProgramError
from pwvault.runtime import (
    SYSTEM_PROGRAM_ID,
    AccountInfo,
    Pubkey,
    Rent,
    create_account,
    create_program_address,
    find_program_address,
    is_on_curve,
    transfer,
)

PROGRAM = Pubkey(bytes([7]) * 32)


def test_system_program_id_renders_as_ones():
    zero_key = Pubkey(bytes(32))
    assert zero_key == SYSTEM_PROGRAM_ID
    assert str(zero_key) == "1" * 32


def test_pubkey_string_keeps_leading_zeros():
    key = Pubkey(bytes(31) + b"\x01")
    assert str(key) == "1" * 31 + "2"


def test_pubkey_bytes_round_trip():
    raw = bytes(range(32))
    assert bytes(Pubkey(raw)) == raw
    assert Pubkey(raw) == Pubkey(bytearray(raw))


def test_pubkey_wrong_length():
    with pytest.raises(ValueError):
        Pubkey(b"short")


def test_rent_minimum_balance_empty_account():
    assert Rent().minimum_balance(0) == 890880


def test_rent_grows_with_size():
    rent = Rent()
    assert rent.minimum_balance(100) > rent.minimum_balance(36)


@pytest.mark.parametrize(
    "raw",
    [bytes(32), b"\x01" + bytes(31), b"\x58" + b"\x66" * 31],
)
def test_known_points_are_on_curve(raw):
    assert is_on_curve(raw) is True


def test_wrong_length_is_not_on_curve():
    assert is_on_curve(b"\x01" * 31) is False


def test_find_program_address_is_off_curve_and_reproducible():
    seeds = [b"vault", b"\x01" * 32, b"work"]
    address, bump = find_program_address(seeds, PROGRAM)
    assert not is_on_curve(bytes(address))
    assert 1 <= bump <= 255
    assert create_program_address([*seeds, bytes([bump])], PROGRAM) == address
    assert find_program_address(seeds, PROGRAM) == (address, bump)


def test_find_program_address_depends_on_seeds_and_program():
    first, _ = find_program_address([b"a"], PROGRAM)
    second, _ = find_program_address([b"b"], PROGRAM)
    third, _ = find_program_address([b"a"], Pubkey(bytes([9]) * 32))
    assert len({first, second, third}) == 3


def test_seed_too_long():
    with pytest.raises(ProgramError):
        create_program_address([b"x" * 33], PROGRAM)
    with pytest.raises(ProgramError):
        find_program_address([b"x" * 33], PROGRAM)


def test_too_many_seeds():
    with pytest.raises(ProgramError):
        create_program_address([b"s"] * 17, PROGRAM)


def test_realloc_grows_with_zeros_and_shrinks():
    account = AccountInfo(PROGRAM, data=b"\x05\x06")
    account.realloc(5)
    assert bytes(account.data) == b"\x05\x06\x00\x00\x00"
    account.realloc(1)
    assert bytes(account.data) == b"\x05"
    assert not account.data_is_empty()
    account.realloc(0)
    assert account.data_is_empty()


def test_create_account_moves_funds_and_assigns():
    payer = AccountInfo(Pubkey(bytes([1]) * 32), lamports=1000, is_signer=True)
    target = AccountInfo(Pubkey(bytes([2]) * 32))
    create_account(payer, target, 300, 10, PROGRAM)
    assert payer.lamports == 700
    assert target.lamports == 300
    assert len(target.data) == 10
    assert target.owner == PROGRAM


def test_create_account_requires_signer():
    payer = AccountInfo(Pubkey(bytes([1]) * 32), lamports=1000)
    target = AccountInfo(Pubkey(bytes([2]) * 32))
    with pytest.raises(ProgramError):
        create_account(payer, target, 300, 10, PROGRAM)


def test_create_account_rejects_funded_target():
    payer = AccountInfo(Pubkey(bytes([1]) * 32), lamports=1000, is_signer=True)
    target = AccountInfo(Pubkey(bytes([2]) * 32), lamports=1)
    with pytest.raises(ProgramError):
        create_account(payer, target, 300, 10, PROGRAM)
    assert payer.lamports == 1000


def test_create_account_insufficient_funds():
    payer = AccountInfo(Pubkey(bytes([1]) * 32), lamports=10, is_signer=True)
    target = AccountInfo(Pubkey(bytes([2]) * 32))
    with pytest.raises(ProgramError):
        create_account(payer, target, 300, 10, PROGRAM)


def test_transfer_moves_lamports():
    source = AccountInfo(Pubkey(bytes([1]) * 32), lamports=50, is_signer=True)
    destination = AccountInfo(Pubkey(bytes([2]) * 32), lamports=5)
    transfer(source, destination, 20)
    assert (source.lamports, destination.lamports) == (30, 25)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lamports": 50, "is_signer": False},
        {"lamports": 50, "is_signer": True, "data": b"\x01"},
        {"lamports": 5, "is_signer": True},
    ],
)
def test_transfer_failures(kwargs):
    source = AccountInfo(Pubkey(bytes([1]) * 32), **kwargs)
    destination = AccountInfo(Pubkey(bytes([2]) * 32))
    with pytest.raises(ProgramError):
        transfer(source, destination, 20)
    assert destination.lamports == 0