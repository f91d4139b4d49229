import pytest

from modnet_keys.keys import DEV_PHRASE, KeyPair, pair_from_suri
from modnet_keys.schemes import (
    CryptoScheme,
    EcdsaScheme,
    Ed25519Scheme,
    Sr25519Scheme,
    blake2_256,
    get_scheme,
    with_crypto_scheme,
)

DEV_SEED = bytes.fromhex("fac7959dbfe72f052e5a0c3c8d6530f202b02fd8f9f5ca3580ec8deb7797479e")


@pytest.mark.parametrize("value,cls", [
    (CryptoScheme.SR25519, Sr25519Scheme),
    (CryptoScheme.ED25519, Ed25519Scheme),
    (CryptoScheme.ECDSA, EcdsaScheme),
    ("sr25519", Sr25519Scheme),
    ("ecdsa", EcdsaScheme),
])
def test_get_scheme_selects_implementation(value, cls):
    assert isinstance(get_scheme(value), cls)


def test_get_scheme_rejects_unknown_value():
    with pytest.raises(ValueError):
        get_scheme("rsa")


def test_with_crypto_scheme_passes_implementation_first():
    seen = []

    def operation(scheme, a, b=None):
        seen.append((scheme.name, a, b))
        return "done"

    assert with_crypto_scheme(CryptoScheme.ED25519, operation, 1, b=2) == "done"
    assert seen == [("ed25519", 1, 2)]


def test_public_key_lengths():
    for scheme_value in CryptoScheme:
        scheme = get_scheme(scheme_value)
        pair = KeyPair.from_seed(scheme, DEV_SEED)
        assert len(pair.public()) == scheme.public_key_length


def test_account_id_identity_for_32_byte_keys():
    scheme = get_scheme(CryptoScheme.SR25519)
    public = bytes(range(32))
    assert scheme.account_id(public) == public


def test_account_id_hashes_wide_keys():
    scheme = get_scheme(CryptoScheme.ECDSA)
    pair = KeyPair.from_seed(scheme, DEV_SEED)
    assert pair.account_id() == blake2_256(pair.public())
    assert len(pair.account_id()) == 32


def test_ed25519_signatures_are_deterministic():
    scheme = get_scheme(CryptoScheme.ED25519)
    pair = pair_from_suri(scheme, "//Alice")
    first = pair.sign(b"message")
    assert len(first) == 64
    assert first == pair.sign(b"message")


def test_ecdsa_signatures_are_recoverable_and_deterministic():
    scheme = get_scheme(CryptoScheme.ECDSA)
    pair = pair_from_suri(scheme, "//Alice")
    first = pair.sign(b"message")
    assert len(first) == 65
    assert first[64] in (0, 1)
    assert first == pair.sign(b"message")


def test_sr25519_signature_verifies():
    import sr25519

    scheme = get_scheme(CryptoScheme.SR25519)
    pair = pair_from_suri(scheme, DEV_PHRASE)
    signature = pair.sign(b"message")
    assert len(signature) == 64
    assert sr25519.verify(signature, b"message", pair.public())


def test_known_alice_keys():
    alice_sr = pair_from_suri(get_scheme("sr25519"), "//Alice")
    assert alice_sr.public().hex() == "d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d"
    alice_ed = pair_from_suri(get_scheme("ed25519"), "//Alice")
    assert alice_ed.public().hex() == "88dc3417d5058ec4b4503e0c12ea1a0a89be200fe98922423d4334014fa6b0ee"
    alice_ecdsa = pair_from_suri(get_scheme("ecdsa"), "//Alice")
    assert alice_ecdsa.public().hex() == "020a1091341fe5664bfa1782d5e04779689068c916b04cb365ec3153755684d9a1"


def test_address_uses_network_override():
    scheme = get_scheme("sr25519")
    public = pair_from_suri(scheme, "//Alice").public()
    assert scheme.to_address(public) == "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
    assert scheme.to_address(public, 0) == "15oF4uVJwmo4TdGW7VfQxNLavjCXviqxT9S1MgbjMNHr6Sp5"
