from .main import *
from .errors import SaltedAESError
from .version import __version__

def encrypt(plaintext: str, password, *, rng=None): return saltedaes.encrypt(plaintext, password, rng=rng)
def decrypt(text: str, password, *, trim_whitespace: bool | None = None): return saltedaes.decrypt(text, password, trim_whitespace=trim_whitespace)

def derive(password, salt: bytes, iterations: int = saltedaes.NOMINAL_ITERATIONS): return saltedaes.derive(password, salt, iterations)
def evp_bytes_to_key(password: bytes, salt, key_len: int = saltedaes.KEY_LEN, iv_len: int = saltedaes.IV_LEN, count: int = saltedaes.KDF_ROUNDS):
    return saltedaes.evp_bytes_to_key(password, salt, key_len, iv_len, count)

def encrypt_block(key: bytes, iv: bytes, plaintext: bytes): return saltedaes.encrypt_block(key, iv, plaintext)
def decrypt_block(key: bytes, iv: bytes, ciphertext: bytes): return saltedaes.decrypt_block(key, iv, ciphertext)

def frame(salt: bytes, ciphertext: bytes): return saltedaes.frame(salt, ciphertext)
def unframe(data: bytes): return saltedaes.unframe(data)
def encode_frame(data: bytes): return saltedaes.encode_frame(data)
def decode_frame(text): return saltedaes.decode_frame(text)

def set_debug(enabled: bool = True): return saltedaes.set_debug(enabled)

__all__ = [
    "DecryptionFailure",
    "EncryptionFailure",
    "MalformedInputError",
    "SaltedAESError",
    "__version__",
    "decode_frame",
    "decrypt",
    "decrypt_block",
    "derive",
    "encode_frame",
    "encrypt",
    "encrypt_block",
    "evp_bytes_to_key",
    "frame",
    "saltedaes",
    "set_debug",
    "unframe",
]
