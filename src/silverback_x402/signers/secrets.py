"""Owned secret handle for signing credentials.

Key material enters the process once, is wrapped here, and is only ever
unwrapped by the signing backend that owns it. The handle cannot be
copied, pickled or printed.
"""

from typing import Union

from pydantic import SecretStr

from ..engine.exceptions import ConfigurationError


def normalize_hex_key(raw: str) -> str:
    """Return a secp256k1 hex private key with exactly one ``0x`` prefix."""
    key = raw.strip()
    if key[:2].lower() == "0x":
        key = key[2:]
    return f"0x{key}"


class PrivateKeyHandle:
    """Opaque, non-copyable holder for a private credential.

    Args:
        value: Key material as a plain string or pydantic ``SecretStr``.
        label: Human-readable name used in error messages (never the key).

    Raises:
        ConfigurationError: If the key material is empty.
    """

    __slots__ = ("_secret", "_label")

    def __init__(self, value: Union[str, SecretStr], label: str = "private key"):
        raw = value.get_secret_value() if isinstance(value, SecretStr) else value
        if not isinstance(raw, str) or not raw.strip():
            raise ConfigurationError(f"{label} is empty")
        self._secret = SecretStr(raw.strip())
        self._label = label

    @property
    def label(self) -> str:
        return self._label

    def reveal(self) -> str:
        """Return the raw key material. Only signing backends call this."""
        return self._secret.get_secret_value()

    def __repr__(self) -> str:
        return f"PrivateKeyHandle({self._label!r}, '**********')"

    __str__ = __repr__

    def __copy__(self):
        raise TypeError("PrivateKeyHandle cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("PrivateKeyHandle cannot be copied")

    def __reduce_ex__(self, protocol):
        raise TypeError("PrivateKeyHandle cannot be serialized")

    def __getstate__(self):
        raise TypeError("PrivateKeyHandle cannot be serialized")
