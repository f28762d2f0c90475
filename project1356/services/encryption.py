"""Encrypted backup export and import.

Backups use the OpenSSL "salted" passphrase format: base64 of
``Salted__`` + 8 byte salt + AES-256-CBC ciphertext, with key and IV
derived from the passphrase by a single MD5 round of EVP_BytesToKey.
The passphrase is a fixed constant shared by every installation, so the
output is obfuscated rather than confidential. Changing it would break
compatibility with existing backup files.
"""

import asyncio
import base64
import hashlib
import json
import logging
import secrets
from typing import Any, Mapping, Tuple, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from pydantic import ValidationError

from ..errors import EMPTY_RESULT_MESSAGE, CorruptBackupError, EncryptionFailure
from ..schemas.backup import EXPORT_VERSION, ExportBundle
from .countdown import now_ms, validate_integrity
from .storage import StorageService

log = logging.getLogger(__name__)

ENCRYPTION_KEY = "project1356-secure-key-v1"
SALT_HEADER = b"Salted__"
SALT_SIZE = 8
KEY_SIZE = 32
BLOCK_SIZE = 16


def _derive_key_iv(passphrase: bytes, salt: bytes) -> Tuple[bytes, bytes]:
    derived = b""
    block = b""
    while len(derived) < KEY_SIZE + BLOCK_SIZE:
        block = hashlib.md5(block + passphrase + salt).digest()  # noqa: S324
        derived += block
    return derived[:KEY_SIZE], derived[KEY_SIZE:KEY_SIZE + BLOCK_SIZE]


def _seal(plaintext: bytes, passphrase: str) -> str:
    salt = secrets.token_bytes(SALT_SIZE)
    key, iv = _derive_key_iv(passphrase.encode("utf-8"), salt)
    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(SALT_HEADER + salt + ciphertext).decode("ascii")


def _open(token: str, passphrase: str) -> bytes:
    raw = base64.b64decode(token.encode("ascii"), validate=True)
    if not raw.startswith(SALT_HEADER) or len(raw) < len(SALT_HEADER) + SALT_SIZE + BLOCK_SIZE:
        raise ValueError("Missing salt header or ciphertext too short")
    salt = raw[len(SALT_HEADER):len(SALT_HEADER) + SALT_SIZE]
    ciphertext = raw[len(SALT_HEADER) + SALT_SIZE:]
    if len(ciphertext) % BLOCK_SIZE:
        raise ValueError("Ciphertext is not a whole number of blocks")
    key, iv = _derive_key_iv(passphrase.encode("utf-8"), salt)
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError:
        # Bad padding means a wrong key or truncated data; treat it as no output.
        return b""


def encrypt(bundle: Union[ExportBundle, Mapping[str, Any]]) -> str:
    try:
        data = bundle.model_dump(mode="json") if isinstance(bundle, ExportBundle) else dict(bundle)
        json_string = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        return _seal(json_string.encode("utf-8"), ENCRYPTION_KEY)
    except Exception as error:
        log.error("Encryption error: %s", error)
        raise EncryptionFailure("Failed to encrypt data") from error


def decrypt(encrypted_data: str) -> ExportBundle:
    trimmed = (encrypted_data or "").strip()
    try:
        plaintext = _open(trimmed, ENCRYPTION_KEY)
    except Exception as error:
        log.error("Decryption error: %s", error)
        raise CorruptBackupError("cipher") from error

    if not plaintext:
        log.error("Decryption failed: empty result (input length %d, preview %r)", len(trimmed), trimmed[:50])
        raise CorruptBackupError("empty", EMPTY_RESULT_MESSAGE)

    try:
        data = json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        log.error("Decryption error: %s", error)
        raise CorruptBackupError("invalid_json") from error

    if not isinstance(data, dict):
        log.error("Invalid data structure after decryption: %s", type(data).__name__)
        raise CorruptBackupError("not_object")

    try:
        return ExportBundle.model_validate(data)
    except ValidationError as error:
        log.error("Decrypted backup does not match the export format: %s", error)
        raise CorruptBackupError("invalid_structure") from error


async def generate_export_data(storage: StorageService, version: str = EXPORT_VERSION) -> ExportBundle:
    commitment, profile, settings = await asyncio.gather(
        storage.load_commitment(),
        storage.load_profile(),
        storage.load_notification_settings(),
    )
    return ExportBundle(
        commitment=commitment,
        profile=profile,
        settings=settings,
        version=version,
        exportedAt=now_ms(),
    )


async def import_data(storage: StorageService, bundle: ExportBundle) -> None:
    if bundle.commitment and not validate_integrity(bundle.commitment.countdown):
        log.error("Backup countdown failed integrity check; nothing imported")
        raise CorruptBackupError("invalid_structure")
    if bundle.commitment:
        await storage.save_commitment(bundle.commitment)
    if bundle.profile:
        await storage.save_profile(bundle.profile)
    if bundle.settings:
        await storage.save_notification_settings(bundle.settings)
    log.info(
        "Imported backup version %s (commitment=%s, profile=%s, settings=%s)",
        bundle.version,
        bundle.commitment is not None,
        bundle.profile is not None,
        bundle.settings is not None,
    )


async def export_backup(storage: StorageService, version: str = EXPORT_VERSION) -> str:
    bundle = await generate_export_data(storage, version)
    token = encrypt(bundle)
    log.info("Exported backup version %s (%d chars)", bundle.version, len(token))
    return token


async def import_backup(storage: StorageService, encrypted_data: str) -> ExportBundle:
    bundle = decrypt(encrypted_data)
    await import_data(storage, bundle)
    return bundle
