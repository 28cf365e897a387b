"""Tests for PasswordHasher."""

from beatdrops.auth.passwords import PasswordHasher


def test_hash_is_salted() -> None:
    hasher = PasswordHasher()
    first = hasher.hash("octopus-garden")
    second = hasher.hash("octopus-garden")

    assert first != second
    assert first.startswith("$pbkdf2-sha256$")


def test_verify() -> None:
    hasher = PasswordHasher()
    stored = hasher.hash("octopus-garden")

    assert hasher.verify("octopus-garden", stored)
    assert not hasher.verify("yellow-submarine", stored)
