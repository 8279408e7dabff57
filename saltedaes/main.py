# SALTEDAES ENCRYPTION ENGINE ->

import logging as _logging_module
import os as _os_module

from .errors import DecryptionFailure, EncryptionFailure, MalformedInputError

_logger = _logging_module.getLogger("saltedaes")
_logger.addHandler(_logging_module.NullHandler())


class saltedaes:
    import base64
    import binascii
    import os
    import sys
    import typing
    import warnings
    from cryptography.hazmat.primitives import hashes, padding
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

    @staticmethod
    def _env_flag(name: str, default: str = "0") -> bool:
        value = _os_module.getenv(name, default)
        return value.strip().lower() in {"1", "true", "yes", "on"}

    ENGINE_VERSION = "1.0.0"
    MAGIC = b"Salted__"  # openssl enc salted header
    SALT_LEN = 8
    KEY_LEN = 32  # AES-256
    IV_LEN = 16
    BLOCK_SIZE = 16
    HEADER_LEN = len(MAGIC) + SALT_LEN
    NOMINAL_ITERATIONS = 1024
    KDF_ROUNDS = 1  # openssl enc always calls EVP_BytesToKey with count=1
    STRING_ENCODING = "utf-8"
    DEBUG = _env_flag("SALTEDAES_DEBUG")
    TRIM_WHITESPACE = _env_flag("SALTEDAES_TRIM_WHITESPACE")

    @classmethod
    def set_debug(cls, enabled: bool = True) -> None:
        """Toggle debug records for salt and IV on the ``saltedaes`` logger."""
        cls.DEBUG = bool(enabled)
        _logger.setLevel(_logging_module.DEBUG if cls.DEBUG else _logging_module.NOTSET)

    @staticmethod
    def _debug(message: str, *args) -> None:
        if saltedaes.DEBUG:
            _logger.debug(message, *args)

    @staticmethod
    def _coerce_password_bytes(
        password: "saltedaes.typing.Union[str, bytes, bytearray, memoryview]"
    ) -> bytes:
        if isinstance(password, str):
            return password.encode(saltedaes.STRING_ENCODING)
        if isinstance(password, (bytes, bytearray, memoryview)):
            return bytes(password)
        raise TypeError(f"Unsupported password type: {type(password)!r}")

    # KEY DERIVATION

    @staticmethod
    def _md5(data: bytes) -> bytes:
        digest = saltedaes.hashes.Hash(saltedaes.hashes.MD5())
        digest.update(data)
        return digest.finalize()

    @staticmethod
    def evp_bytes_to_key(
        password: bytes,
        salt: "saltedaes.typing.Optional[bytes]",
        key_len: int = KEY_LEN,
        iv_len: int = IV_LEN,
        count: int = KDF_ROUNDS
    ) -> "saltedaes.typing.Tuple[bytes, bytes]":
        """OpenSSL EVP_BytesToKey over MD5.

        Each block is D_i = MD5(D_{i-1} || password || salt), re-hashed
        ``count - 1`` more times; blocks are concatenated until there is
        enough material for the key followed by the IV.
        """
        if count < 1:
            raise ValueError("count must be positive")
        if salt is not None and len(salt) != saltedaes.SALT_LEN:
            raise ValueError(f"salt must be {saltedaes.SALT_LEN} bytes")
        password = bytes(password)
        salt = bytes(salt or b"")
        material = bytearray()
        block = b""
        while len(material) < key_len + iv_len:
            block = saltedaes._md5(block + password + salt)
            for _ in range(count - 1):
                block = saltedaes._md5(block)
            material += block
        return bytes(material[:key_len]), bytes(material[key_len:key_len + iv_len])

    @staticmethod
    def derive(
        password: "saltedaes.typing.Union[str, bytes]",
        salt: bytes,
        iterations: int = NOMINAL_ITERATIONS
    ) -> "saltedaes.typing.Tuple[bytes, bytes]":
        """Derives the AES-256 key and CBC IV for ``openssl enc`` salted mode.

        ``iterations`` is the nominal PBE count the format is described with.
        OpenSSL's generator never feeds it into the digest chain, so the key
        and IV come from a single round per block whatever its value.
        """
        if not isinstance(iterations, int) or iterations < 1:
            raise ValueError("iterations must be a positive integer")
        if salt is None or len(salt) != saltedaes.SALT_LEN:
            raise ValueError(f"salt must be {saltedaes.SALT_LEN} bytes")
        return saltedaes.evp_bytes_to_key(
            saltedaes._coerce_password_bytes(password),
            bytes(salt),
            saltedaes.KEY_LEN,
            saltedaes.IV_LEN,
            count=saltedaes.KDF_ROUNDS
        )

    # AES-256-CBC / PKCS#7

    @staticmethod
    def _check_key_iv(key: bytes, iv: bytes) -> None:
        if len(key) != saltedaes.KEY_LEN:
            raise ValueError("AES-256 requires a 32-byte key")
        if len(iv) != saltedaes.IV_LEN:
            raise ValueError("IV must be 16 bytes")

    @staticmethod
    def encrypt_block(key: bytes, iv: bytes, plaintext: bytes) -> bytes:
        if not isinstance(plaintext, (bytes, bytearray, memoryview)):
            raise TypeError("plaintext must be bytes")
        saltedaes._check_key_iv(key, iv)
        padder = saltedaes.padding.PKCS7(saltedaes.BLOCK_SIZE * 8).padder()
        padded = padder.update(bytes(plaintext)) + padder.finalize()
        encryptor = saltedaes.Cipher(
            saltedaes.algorithms.AES(bytes(key)),
            saltedaes.modes.CBC(bytes(iv))
        ).encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    @staticmethod
    def decrypt_block(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
        if not isinstance(ciphertext, (bytes, bytearray, memoryview)):
            raise TypeError("ciphertext must be bytes")
        saltedaes._check_key_iv(key, iv)
        ciphertext = bytes(ciphertext)
        if not ciphertext or len(ciphertext) % saltedaes.BLOCK_SIZE:
            raise ValueError("ciphertext length must be a non-zero multiple of 16")
        decryptor = saltedaes.Cipher(
            saltedaes.algorithms.AES(bytes(key)),
            saltedaes.modes.CBC(bytes(iv))
        ).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = saltedaes.padding.PKCS7(saltedaes.BLOCK_SIZE * 8).unpadder()
        try:
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise ValueError("Invalid PKCS#7 padding") from exc

    # FRAMING

    @staticmethod
    def frame(salt: bytes, ciphertext: bytes, marker: bytes = MAGIC) -> bytes:
        if len(marker) != len(saltedaes.MAGIC):
            raise ValueError("marker must be 8 bytes")
        if len(salt) != saltedaes.SALT_LEN:
            raise ValueError(f"salt must be {saltedaes.SALT_LEN} bytes")
        return bytes(marker) + bytes(salt) + bytes(ciphertext)

    @staticmethod
    def unframe(data: bytes) -> "saltedaes.typing.Tuple[bytes, bytes]":
        data = bytes(data)
        if len(data) < saltedaes.HEADER_LEN:
            raise MalformedInputError(
                f"Frame too short: {len(data)} bytes, need at least {saltedaes.HEADER_LEN}"
            )
        marker_len = len(saltedaes.MAGIC)
        if data[:marker_len] != saltedaes.MAGIC:
            raise MalformedInputError("Frame is missing the 'Salted__' marker")
        return data[marker_len:saltedaes.HEADER_LEN], data[saltedaes.HEADER_LEN:]

    @staticmethod
    def encode_frame(data: bytes) -> str:
        return saltedaes.base64.b64encode(bytes(data)).decode("ascii")

    @staticmethod
    def decode_frame(text: "saltedaes.typing.Union[str, bytes]") -> bytes:
        """Base64 text to frame bytes; line-wrapped ``openssl enc -a`` output is accepted."""
        if isinstance(text, str):
            try:
                raw = text.encode("ascii")
            except UnicodeEncodeError as exc:
                raise MalformedInputError("Input is not valid base64") from exc
        elif isinstance(text, (bytes, bytearray, memoryview)):
            raw = bytes(text)
        else:
            raise MalformedInputError(f"Unsupported input type: {type(text)!r}")
        compact = b"".join(raw.split())
        try:
            return saltedaes.base64.b64decode(compact, validate=True)
        except saltedaes.binascii.Error as exc:
            raise MalformedInputError("Input is not valid base64") from exc

    # REVERSIBLE  - openssl enc -aes-256-cbc -md md5 -a

    @staticmethod
    def encrypt(
        plaintext: str,
        password: "saltedaes.typing.Union[str, bytes]",
        *,
        rng: "saltedaes.typing.Optional[saltedaes.typing.Callable[[int], bytes]]" = None
    ) -> str:
        try:
            if not isinstance(plaintext, str):
                raise TypeError("plaintext must be str")
            salt = bytes((rng or saltedaes.os.urandom)(saltedaes.SALT_LEN))
            if len(salt) != saltedaes.SALT_LEN:
                raise ValueError(
                    f"Random source returned {len(salt)} bytes, expected {saltedaes.SALT_LEN}"
                )
            key, iv = saltedaes.derive(password, salt)
            saltedaes._debug("encrypt: salt=%s iv=%s", salt.hex(), iv.hex())
            ciphertext = saltedaes.encrypt_block(
                key, iv, plaintext.encode(saltedaes.STRING_ENCODING)
            )
            return saltedaes.encode_frame(saltedaes.frame(salt, ciphertext))
        except Exception as exc:
            raise EncryptionFailure("Could not encrypt string", plaintext=plaintext) from exc

    @staticmethod
    def decrypt(
        text: str,
        password: "saltedaes.typing.Union[str, bytes]",
        *,
        trim_whitespace: "saltedaes.typing.Optional[bool]" = None
    ) -> str:
        try:
            salt, ciphertext = saltedaes.unframe(saltedaes.decode_frame(text))
            key, iv = saltedaes.derive(password, salt)
            saltedaes._debug("decrypt: salt=%s iv=%s", salt.hex(), iv.hex())
            plain = saltedaes.decrypt_block(key, iv, ciphertext).decode(saltedaes.STRING_ENCODING)
        except DecryptionFailure as exc:
            if exc.ciphertext is None:
                exc.ciphertext = text
            raise
        except Exception as exc:
            raise DecryptionFailure("Could not decrypt string", ciphertext=text) from exc
        if trim_whitespace is None:
            trim_whitespace = saltedaes.TRIM_WHITESPACE
        if trim_whitespace:
            trimmed = plain.rstrip()
            if trimmed != plain:
                saltedaes.warnings.warn(
                    "Trailing whitespace trimmed from decrypted text",
                    RuntimeWarning,
                    stacklevel=3
                )
            plain = trimmed
        return plain


if saltedaes.DEBUG:
    saltedaes.set_debug(True)


def _resolve_password(cli_value: "str | None") -> str:
    if cli_value is not None:
        return cli_value
    env_value = _os_module.getenv("SALTEDAES_PASSWORD")
    if env_value is not None:
        return env_value
    import getpass
    return getpass.getpass("Password: ")


def _print_params(password: str, encoded: str) -> None:
    salt, _ = saltedaes.unframe(saltedaes.decode_frame(encoded))
    key, iv = saltedaes.derive(password, salt)
    print(f"salt={salt.hex().upper()}")
    print(f"key={key.hex().upper()}")
    print(f"iv ={iv.hex().upper()}")


def cli(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        prog="saltedaes",
        description="openssl enc -aes-256-cbc compatible password encryption"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log salt and IV to stderr"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("enc", "Encrypt text to a base64 'Salted__' frame"),
        ("dec", "Decrypt a base64 'Salted__' frame to text"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "text",
            nargs="?",
            default=None,
            help="Input text (read from stdin when omitted)"
        )
        sub.add_argument(
            "-p", "--password",
            default=None,
            help="Password (defaults to $SALTEDAES_PASSWORD, else prompt)"
        )
        sub.add_argument(
            "-P", "--print-params",
            action="store_true",
            help="Print salt, key and IV in hex like 'openssl enc -p'"
        )
        if name == "dec":
            sub.add_argument(
                "--trim",
                action="store_true",
                default=None,
                help="Trim trailing whitespace from the decrypted text"
            )

    args = parser.parse_args(argv)

    if args.debug:
        handler = _logging_module.StreamHandler(saltedaes.sys.stderr)
        handler.setFormatter(_logging_module.Formatter("%(name)s: %(message)s"))
        _logger.addHandler(handler)
        saltedaes.set_debug(True)

    data = args.text if args.text is not None else saltedaes.sys.stdin.read()
    password = _resolve_password(args.password)

    try:
        if args.command == "enc":
            result = saltedaes.encrypt(data, password)
            if args.print_params:
                _print_params(password, result)
        else:
            result = saltedaes.decrypt(data, password, trim_whitespace=args.trim)
            if args.print_params:
                _print_params(password, data)
    except (EncryptionFailure, DecryptionFailure) as exc:
        print(f"Error: {exc}", file=saltedaes.sys.stderr)
        return 1

    print(result)
    return 0


def main(argv=None) -> int:
    return cli(argv)


if __name__ == "__main__":
    raise SystemExit(main())
