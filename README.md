# pwvault

`pwvault` models a small password-vault program. The program keeps
credential records in accounts that it owns. A wallet first gets a user
account. It then creates named vaults, and the user account records the
address of each vault. A vault holds a list of fixed-size credential
records.

## Modules

- `pwvault.instructions` decodes raw instruction bytes. `unpack(data)`
  returns one of these instructions: `InitUserAccount`,
  `InitVaultAccount`, `InitAddInVault` or `EditVaultAccount`. The module
  also has the helpers `unpack_data`, `unpack_index` and `unpack_name`.
  Each helper splits a 64-byte blob, a little-endian u32 or a
  zero-padded 32-byte name off the front of its input and returns the
  value with the remaining bytes.
- `pwvault.state` holds the account layouts `UserAccount`,
  `VaultAccount` and `Credentials`. Each one converts to bytes with
  `to_bytes()` and back with `from_bytes()`. The byte layout is
  Borsh-compatible: fixed-size byte arrays are written as they are, and
  each list is prefixed with its length as a little-endian u32.
  `from_bytes` raises `ProgramError` when the data is truncated or has
  bytes left over.
- `pwvault.runtime` is an in-memory account runtime. It provides:
  - `Pubkey`, a 32-byte address. `str()` gives its base58 form.
  - `AccountInfo`, which holds `key`, `lamports`, `data`, `owner`,
    `is_signer` and `is_writable`.
  - `Rent`, whose `minimum_balance(data_len)` gives the rent-exempt
    balance for an account of that size.
  - `find_program_address`, `create_program_address` and `is_on_curve`
    for program-derived addresses.
  - `create_account` and `transfer`, which move lamports between
    accounts.
- `pwvault.processor` runs instructions against these accounts.
  `process_instruction(program_id, accounts, instruction_data, rent=None)`
  decodes the data and calls one of `process_init_user_account`,
  `process_init_vault`, `process_add_in_vault` or `process_edit_vault`.
  If the instruction raises `ProgramError`, every account gets back the
  lamports, data and owner it had before the instruction ran. Progress
  messages go to the standard `logging` logger `pwvault.processor`.

## Errors

All errors derive from `pwvault.errors.ProgramError`. The program's own
failures raise the subclass `VaultError`. A `VaultError` carries an
`ErrorCode` in its `code` attribute, and `custom_code` gives the same
code as an integer. The codes are:

- `INVALID_ACCOUNT_DATA` (0)
- `DATA_UNPACK_ERROR` (1)
- `INVALID_INSTRUCTION` (2)
- `TOO_MUCH_DATA` (3)

## Instruction layout

The first byte of an instruction is its tag:

| Tag | Instruction        | Rest of the data                                              |
|-----|--------------------|---------------------------------------------------------------|
| 0   | `InitUserAccount`  | nothing                                                       |
| 1   | `InitVaultAccount` | vault name (UTF-8)                                            |
| 2   | `InitAddInVault`   | 64-byte credential blob, then vault name                      |
| 3   | `EditVaultAccount` | delete flag (1 byte), index (u32 LE), 64-byte blob, then name |

The accounts each instruction expects, in order:

| Instruction        | Accounts                                        |
|--------------------|-------------------------------------------------|
| `InitUserAccount`  | wallet (signer), user account, system program   |
| `InitVaultAccount` | wallet (signer), user account, vault, system program |
| `InitAddInVault`   | wallet (signer), system program, vault          |
| `EditVaultAccount` | wallet (signer), vault, system program          |

The user account's address is derived from the seeds
`b"user_at_password_manager"` and the wallet key. A vault's address is
derived from `b"vault"`, the wallet key and the vault name.

A credential blob is two 32-byte parts, `field` and `passkey`. The
program stores the blob exactly as it receives it, so encrypt it before
you send it.

## Example

```python
from pwvault.instructions import unpack, InitAddInVault
from pwvault.processor import process_instruction
from pwvault.runtime import AccountInfo, Pubkey, SYSTEM_PROGRAM_ID, find_program_address
from pwvault.state import UserAccount, VaultAccount

instruction = unpack(bytes([2]) + bytes(64) + b"personal")
assert isinstance(instruction, InitAddInVault)
assert instruction.vault_name == "personal"

program_id = Pubkey(bytes(range(32)))
wallet = AccountInfo(key=Pubkey(b"\x01" * 32), lamports=10**9, is_signer=True)
system = AccountInfo(key=SYSTEM_PROGRAM_ID)

user_key, _ = find_program_address([b"user_at_password_manager", bytes(wallet.key)], program_id)
user = AccountInfo(key=user_key)
process_instruction(program_id, [wallet, user, system], bytes([0]))
assert user.owner == program_id

vault_key, _ = find_program_address([b"vault", bytes(wallet.key), b"personal"], program_id)
vault = AccountInfo(key=vault_key)
process_instruction(program_id, [wallet, user, vault, system], bytes([1]) + b"personal")

assert UserAccount.from_bytes(bytes(user.data)).vaults == [bytes(vault_key)]
assert VaultAccount.from_bytes(bytes(vault.data)).data == []
```

## Limitations

- The runtime is an in-memory model. It does not connect to a network,
  does not sign or submit transactions, and does not save accounts
  anywhere. The package has no command-line tool.
- `process_add_in_vault` sizes the vault from its number of entries
  plus 64 bytes, not from the vault's current data length. On a fresh
  vault the data then becomes too small for the encoded record, and the
  instruction fails with `ProgramError`.
- When `process_edit_vault` removes an entry (`delete` other than 0),
  it refunds rent by a `transfer` out of the vault. The runtime refuses
  a transfer from an account that holds data, so removal fails with
  `ProgramError`.
- When `process_edit_vault` replaces an entry (`delete == 0`), an index
  that does not exist raises `ProgramError`.