"""Instruction processing for the password vault program."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from pwvault.errors import ErrorCode, ProgramError, VaultError
from pwvault.instructions import (
    EditVaultAccount,
    InitAddInVault,
    InitUserAccount,
    InitVaultAccount,
    unpack,
)
from pwvault.runtime import (
    AccountInfo,
    Pubkey,
    Rent,
    create_account,
    find_program_address,
    transfer,
)
from pwvault.state import NAME_LEN, Credentials, UserAccount, VaultAccount

log = logging.getLogger(__name__)

USER_SEED = b"user_at_password_manager"
VAULT_SEED = b"vault"
USER_ACCOUNT_SIZE = 32 + 4
VAULT_ACCOUNT_SIZE = 32 + 32 + 4
MAX_VAULT_DATA = 10176


def _next_account(accounts: Iterator[AccountInfo]) -> AccountInfo:
    account = next(accounts, None)
    if account is None:
        raise ProgramError("not enough account keys")
    return account


def _store(account: AccountInfo, encoded: bytes) -> None:
    if len(encoded) > len(account.data):
        raise ProgramError("failed to write whole buffer: account data too small")
    account.data[: len(encoded)] = encoded


def _invalid(message: str) -> VaultError:
    log.info(message)
    return VaultError(ErrorCode.INVALID_ACCOUNT_DATA, message)


def _vault_address(wallet: AccountInfo, vault_name: str, program_id: Pubkey) -> tuple[Pubkey, int]:
    return find_program_address(
        [VAULT_SEED, bytes(wallet.key), vault_name.encode("utf-8")], program_id
    )


def process_instruction(
    program_id: Pubkey,
    accounts: Sequence[AccountInfo],
    instruction_data: bytes,
    rent: Rent | None = None,
) -> None:
    """Decode and run one instruction; on error every account is left unchanged."""
    rent = rent or Rent()
    instruction = unpack(instruction_data)
    snapshot = [(acc, acc.lamports, bytes(acc.data), acc.owner) for acc in accounts]
    try:
        match instruction:
            case InitUserAccount():
                log.info("User account created")
                process_init_user_account(program_id, accounts, rent)
            case InitVaultAccount(vault_name=name):
                log.info("Vault account creation")
                process_init_vault(program_id, accounts, name, rent)
            case InitAddInVault(vault_name=name, data=blob):
                log.info("Adding in vault account")
                process_add_in_vault(program_id, accounts, blob, name, rent)
            case EditVaultAccount(data=blob, vault_name=name, index=index, delete=delete):
                log.info("Vault account edit")
                process_edit_vault(program_id, accounts, blob, index, delete, name, rent)
    except ProgramError:
        for account, lamports, data, owner in snapshot:
            account.lamports = lamports
            account.data = bytearray(data)
            account.owner = owner
        raise


def process_init_user_account(
    program_id: Pubkey, accounts: Sequence[AccountInfo], rent: Rent | None = None
) -> None:
    """Create the wallet's user account at its derived address if it is missing."""
    rent = rent or Rent()
    it = iter(accounts)
    wallet = _next_account(it)
    user = _next_account(it)
    _next_account(it)

    if not wallet.is_signer:
        raise _invalid("wallet is not the signer")
    user_pda, _ = find_program_address([USER_SEED, bytes(wallet.key)], program_id)
    if user_pda != user.key:
        raise _invalid("invalid user address")

    if not user.data_is_empty():
        log.info("User account already created")
        return
    create_account(
        wallet, user, rent.minimum_balance(USER_ACCOUNT_SIZE), USER_ACCOUNT_SIZE, program_id
    )
    _store(user, UserAccount(bytes(wallet.key), []).to_bytes())


def process_init_vault(
    program_id: Pubkey,
    accounts: Sequence[AccountInfo],
    vault_name: str,
    rent: Rent | None = None,
) -> None:
    """Create a named vault and record it in the wallet's user account."""
    rent = rent or Rent()
    it = iter(accounts)
    wallet = _next_account(it)
    user = _next_account(it)
    vault = _next_account(it)
    _next_account(it)

    if not wallet.is_signer:
        raise _invalid("wallet is not the signer")
    vault_pda, _ = _vault_address(wallet, vault_name, program_id)
    user_pda, _ = find_program_address([USER_SEED, bytes(wallet.key)], program_id)
    if vault_pda != vault.key:
        raise _invalid(f"invalid vault address: expected {vault_pda}, got {vault.key}")
    if user_pda != user.key:
        raise _invalid(f"invalid user address: expected {user_pda}, got {user.key}")
    if user.data_is_empty() or user.owner != program_id:
        raise _invalid("user account not initialized or not owned by program")

    user_data = UserAccount.from_bytes(bytes(user.data))
    log.info("Vault name: %s", vault_name)

    if not vault.data_is_empty():
        raise _invalid("vault account already exists")

    create_account(
        wallet, vault, rent.minimum_balance(VAULT_ACCOUNT_SIZE), VAULT_ACCOUNT_SIZE, program_id
    )

    old_size = len(user.data)
    new_size = old_size + 32
    rent_diff = max(rent.minimum_balance(new_size) - rent.minimum_balance(old_size), 0)
    if rent_diff > 0:
        transfer(wallet, user, rent_diff)

    name = vault_name.encode("utf-8")[:NAME_LEN].ljust(NAME_LEN, b"\0")
    _store(vault, VaultAccount(name, bytes(user.key), []).to_bytes())

    user.realloc(new_size)
    user_data.vaults.append(bytes(vault.key))
    _store(user, user_data.to_bytes())
    log.info("Vault created: %s for user %s", vault_name, wallet.key)


def process_add_in_vault(
    program_id: Pubkey,
    accounts: Sequence[AccountInfo],
    data: bytes,
    vault_name: str,
    rent: Rent | None = None,
) -> None:
    """Append a credential entry to an existing vault."""
    rent = rent or Rent()
    data = bytes(data)
    it = iter(accounts)
    wallet = _next_account(it)
    _next_account(it)
    vault = _next_account(it)

    if not wallet.is_signer:
        raise _invalid("wallet is not the signer")
    vault_pda, _ = _vault_address(wallet, vault_name, program_id)
    if vault_pda != vault.key:
        raise _invalid("invalid vault address")
    if len(vault.data) > MAX_VAULT_DATA:
        log.info("Need to create a new vault")
        raise VaultError(ErrorCode.TOO_MUCH_DATA, "vault is full")
    if vault.data_is_empty():
        raise _invalid("vault account is not created yet")

    credential = Credentials.from_bytes(data)
    vault_data = VaultAccount.from_bytes(bytes(vault.data))
    old_size = len(vault_data.data)
    new_size = old_size + len(data)
    rent_diff = rent.minimum_balance(new_size) - rent.minimum_balance(old_size)
    transfer(wallet, vault, rent_diff)

    vault.realloc(new_size)
    vault_data.data.append(credential)
    _store(vault, vault_data.to_bytes())


def process_edit_vault(
    program_id: Pubkey,
    accounts: Sequence[AccountInfo],
    data: bytes,
    index: int,
    delete: int,
    vault_name: str,
    rent: Rent | None = None,
) -> None:
    """Replace the entry at index when delete is 0, otherwise remove it."""
    rent = rent or Rent()
    data = bytes(data)
    it = iter(accounts)
    wallet = _next_account(it)
    vault = _next_account(it)
    _next_account(it)

    if not wallet.is_signer:
        raise _invalid("wallet is not the signer")
    vault_pda, _ = _vault_address(wallet, vault_name, program_id)
    if vault.key != vault_pda:
        raise _invalid("invalid vault address")

    if delete == 0:
        vault_data = VaultAccount.from_bytes(bytes(vault.data))
        credential = Credentials.from_bytes(data)
        if index >= len(vault_data.data):
            raise ProgramError(f"index {index} out of range")
        vault_data.data[index] = credential
        _store(vault, vault_data.to_bytes())
        return

    old_size = len(vault.data)
    new_size = old_size - len(data)
    if new_size < 0:
        raise ProgramError("arithmetic overflow shrinking vault")
    rent_diff = rent.minimum_balance(old_size) - rent.minimum_balance(new_size)
    transfer(vault, wallet, rent_diff)

    vault.realloc(new_size)
    vault_data = VaultAccount.from_bytes(bytes(vault.data))
    if index >= len(vault_data.data):
        raise ProgramError(f"index {index} out of range")
    del vault_data.data[index]
    _store(vault, vault_data.to_bytes())