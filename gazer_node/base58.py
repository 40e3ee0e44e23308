"""Base58 encoding with the Bitcoin alphabet."""

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

_INDEX = {char: position for position, char in enumerate(BASE58_ALPHABET)}


def bytes_to_base58(data: bytes) -> str:
    """Encode bytes as Base58; each leading zero byte becomes a '1'."""
    if not data:
        return ""
    number = int.from_bytes(data, "big")
    digits = []
    while number > 0:
        number, remainder = divmod(number, 58)
        digits.append(BASE58_ALPHABET[remainder])
    leading_zeros = len(data) - len(data.lstrip(b"\x00"))
    return "1" * leading_zeros + "".join(reversed(digits))


def base58_to_bytes(text: str) -> bytes:
    """Decode a Base58 string; raises ValueError on a character outside the alphabet."""
    if not text:
        return b""
    number = 0
    for char in text:
        try:
            index = _INDEX[char]
        except KeyError:
            raise ValueError(f"invalid Base58 character: {char!r}") from None
        number = number * 58 + index
    body = number.to_bytes((number.bit_length() + 7) // 8, "big")
    leading_zeros = len(text) - len(text.lstrip("1"))
    return b"\x00" * leading_zeros + body