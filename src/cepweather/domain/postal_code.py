"""CEP (Brazilian postal code) validation.

Only the length is checked: a CEP must be exactly eight bytes of UTF-8
before any outbound call is attempted, so an accented character counts
for more than one. Whether those characters are digits is left to the
postal directory.
"""

from __future__ import annotations

CEP_LENGTH = 8


def cep_length(cep: str) -> int:
    """Length of *cep* as UTF-8 bytes."""
    return len(cep.encode("utf-8", "surrogatepass"))


def is_valid_cep(cep: str | None) -> bool:
    """Return True when *cep* is a string of exactly eight UTF-8 bytes."""
    return isinstance(cep, str) and cep_length(cep) == CEP_LENGTH
