import pytest

from pwvault.errors import ErrorCode, ProgramError, VaultError


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        (ErrorCode.INVALID_ACCOUNT_DATA, 0),
        (ErrorCode.DATA_UNPACK_ERROR, 1),
        (ErrorCode.INVALID_INSTRUCTION, 2),
        (ErrorCode.TOO_MUCH_DATA, 3),
    ],
)
def test_codes_follow_declaration_order(code, expected):
    err = VaultError(code)
    assert err.custom_code == expected
    assert VaultError(expected).code is code


def test_custom_code_matches_enum_value():
    err = VaultError(ErrorCode.TOO_MUCH_DATA)
    assert err.custom_code == int(ErrorCode.TOO_MUCH_DATA)
    assert err.code is ErrorCode.TOO_MUCH_DATA


def test_int_code_is_converted():
    err = VaultError(int(ErrorCode.DATA_UNPACK_ERROR), "short input")
    assert err.code is ErrorCode.DATA_UNPACK_ERROR
    assert str(err) == "short input"


def test_default_message_names_the_code():
    err = VaultError(ErrorCode.INVALID_INSTRUCTION)
    assert str(err) == "invalid instruction"


def test_unknown_code_is_rejected():
    with pytest.raises(ValueError):
        VaultError(len(ErrorCode) + 10)


def test_vault_error_is_a_program_error():
    err = VaultError(ErrorCode.INVALID_ACCOUNT_DATA, "bad account")
    with pytest.raises(ProgramError) as info:
        raise err
    assert info.value is err
    assert err.custom_code == 0
    assert str(err) == "bad account"