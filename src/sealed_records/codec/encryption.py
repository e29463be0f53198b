# Authenticated Codec - Envelope Encryption
#
# Passphrase → Encryption key (scrypt, fixed salt)
# Payload encryption (AES-256-GCM, 16-byte nonce)
# Wire format: base64(nonce):base64(tag):base64(ciphertext)

import base64
import binascii
import logging
import os
from dataclasses import dataclass
from typing import Union

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from cryptography.hazmat.backends import default_backend

from .exceptions import AuthenticationError, EncryptionError, FormatError

logger = logging.getLogger(__name__)

# Known weakness: a constant salt means the key depends on the passphrase
# alone. Kept as the default so envelopes from existing deployments still open.
DEFAULT_SALT = b"salt"

KEY_LENGTH = 32    # 256 bits for AES-256
NONCE_LENGTH = 16  # 128-bit IV
TAG_LENGTH = 16    # 128-bit GCM tag

# scrypt cost parameters
SCRYPT_N = 2 ** 14
SCRYPT_R = 8
SCRYPT_P = 1

DELIMITER = ":"
FORMAT_MESSAGE = "Invalid encrypted format. Expected iv:tag:data"


def derive_key(passphrase: Union[str, bytes], salt: bytes = DEFAULT_SALT) -> bytes:
    """
    Derive a 256-bit key from a passphrase using scrypt.

    Same passphrase + same salt always yields the same key. The key is
    recomputed on every call and never cached.

    Raises:
        EncryptionError: scrypt is not available in the linked OpenSSL
    """
    if isinstance(passphrase, str):
        passphrase = passphrase.encode("utf-8")

    try:
        kdf = Scrypt(
            salt=salt,
            length=KEY_LENGTH,
            n=SCRYPT_N,
            r=SCRYPT_R,
            p=SCRYPT_P,
            backend=default_backend(),
        )
        return kdf.derive(passphrase)
    except UnsupportedAlgorithm as e:
        raise EncryptionError(f"Key derivation unavailable: {e}") from e


@dataclass(frozen=True)
class EnvelopeParts:
    """Decoded fields of an envelope, in wire order."""

    nonce: bytes
    tag: bytes
    ciphertext: bytes

    def encode(self) -> str:
        """Render the parts in the colon-delimited wire format."""
        return DELIMITER.join(
            base64.b64encode(field).decode("ascii")
            for field in (self.nonce, self.tag, self.ciphertext)
        )


def _b64decode(field: str) -> bytes:
    try:
        return base64.b64decode(field, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"{FORMAT_MESSAGE} (invalid base64)") from e


def split_envelope(envelope: str) -> EnvelopeParts:
    """
    Parse an envelope into its decoded parts without decrypting.

    Raises:
        FormatError: wrong field count, invalid base64, or a nonce/tag
            that is not exactly 16 bytes
    """
    parts = envelope.split(DELIMITER)
    if len(parts) != 3:
        raise FormatError(FORMAT_MESSAGE)

    nonce, tag, ciphertext = (_b64decode(part) for part in parts)

    if len(nonce) != NONCE_LENGTH:
        raise FormatError(f"{FORMAT_MESSAGE} (iv must be {NONCE_LENGTH} bytes)")
    if len(tag) != TAG_LENGTH:
        raise FormatError(f"{FORMAT_MESSAGE} (tag must be {TAG_LENGTH} bytes)")

    return EnvelopeParts(nonce=nonce, tag=tag, ciphertext=ciphertext)


class AuthenticatedCodec:
    """
    Seals plaintext strings into authenticated envelopes and opens them again.

    Flow:
    1. scrypt derives a 256-bit key from passphrase + salt
    2. AES-256-GCM encrypts the UTF-8 plaintext under a fresh 16-byte nonce
    3. nonce, tag and ciphertext are base64-encoded and joined with ':'

    The codec holds nothing but its read-only salt, so a single instance
    can be shared across threads.
    """

    def __init__(self, salt: bytes = DEFAULT_SALT):
        self.salt = salt

    def seal(self, plaintext: str, passphrase: Union[str, bytes]) -> str:
        """
        Encrypt ``plaintext`` and return the envelope string.

        Sealing the same input twice gives two different envelopes
        (different nonce) that open to the same plaintext.

        Raises:
            FormatError: plaintext contains lone surrogates
            EncryptionError: cipher, KDF or random source unavailable
        """
        try:
            data = plaintext.encode("utf-8")
        except UnicodeEncodeError as e:
            raise FormatError("Plaintext is not encodable as UTF-8") from e

        key = derive_key(passphrase, self.salt)

        try:
            nonce = os.urandom(NONCE_LENGTH)
        except (NotImplementedError, OSError) as e:
            raise EncryptionError(f"Random source unavailable: {e}") from e

        try:
            sealed = AESGCM(key).encrypt(nonce, data, None)
        except UnsupportedAlgorithm as e:
            raise EncryptionError(f"AES-256-GCM unavailable: {e}") from e

        # AESGCM appends the tag to the ciphertext
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return EnvelopeParts(nonce=nonce, tag=tag, ciphertext=ciphertext).encode()

    def open(self, envelope: str, passphrase: Union[str, bytes]) -> str:
        """
        Verify and decrypt an envelope produced by :meth:`seal`.

        Tag verification happens before any plaintext is released.

        Raises:
            FormatError: malformed envelope
            AuthenticationError: tag mismatch (tampering or wrong passphrase)
            EncryptionError: cipher or KDF unavailable
        """
        parts = split_envelope(envelope)
        key = derive_key(passphrase, self.salt)

        try:
            plaintext = AESGCM(key).decrypt(parts.nonce, parts.ciphertext + parts.tag, None)
        except InvalidTag as e:
            logger.warning("Envelope rejected: authentication failed")
            raise AuthenticationError("Unable to authenticate data") from e
        except UnsupportedAlgorithm as e:
            raise EncryptionError(f"AES-256-GCM unavailable: {e}") from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError("Decrypted payload is not valid UTF-8") from e


_default_codec = AuthenticatedCodec()


def seal(plaintext: str, passphrase: Union[str, bytes]) -> str:
    """Seal ``plaintext`` with the default (fixed-salt) codec."""
    return _default_codec.seal(plaintext, passphrase)


def open_envelope(envelope: str, passphrase: Union[str, bytes]) -> str:
    """Open ``envelope`` with the default (fixed-salt) codec."""
    return _default_codec.open(envelope, passphrase)
