import pytest

from modnet_keys.errors import (
    FileAccessError,
    InvalidKeyMaterial,
    KeytoolError,
    MissingPassword,
    UnsupportedDerivation,
)
from modnet_keys.keys import (
    DEV_PHRASE,
    DerivedPair,
    DerivedPublic,
    KeyPair,
    derive,
    from_phrase,
    from_string_with_seed,
    generate_mnemonic,
    get_password,
    pair_from_suri,
    public_from_string,
    read_uri,
    secret_scope,
)
from modnet_keys.schemes import get_scheme

DEV_SEED_HEX = "fac7959dbfe72f052e5a0c3c8d6530f202b02fd8f9f5ca3580ec8deb7797479e"
DEV_PUBLIC_HEX = "46ebddef8cd9bb167dc30878d7113b7e168e6f0646beffd77d69d39bad76b47a"
ALICE = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
ALICE_PUBLIC_HEX = "d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d"

sr25519 = get_scheme("sr25519")
ed25519 = get_scheme("ed25519")
ecdsa = get_scheme("ecdsa")


def test_from_phrase_returns_seed():
    pair, seed = from_phrase(sr25519, DEV_PHRASE)
    assert seed.hex() == DEV_SEED_HEX
    assert pair.public().hex() == DEV_PUBLIC_HEX


def test_from_phrase_rejects_paths():
    with pytest.raises(InvalidKeyMaterial):
        from_phrase(sr25519, DEV_PHRASE + "//Alice")


def test_password_changes_the_key():
    plain, _ = from_phrase(sr25519, DEV_PHRASE)
    protected, _ = from_phrase(sr25519, DEV_PHRASE, "secret")
    assert plain.public() != protected.public()


def test_embedded_password_matches_argument():
    embedded, _ = from_string_with_seed(ed25519, DEV_PHRASE + "///secret")
    argument, _ = from_string_with_seed(ed25519, DEV_PHRASE, "secret")
    assert embedded.public() == argument.public()


def test_empty_phrase_is_dev_phrase():
    short, _ = from_string_with_seed(sr25519, "//Alice")
    full, _ = from_string_with_seed(sr25519, DEV_PHRASE + "//Alice")
    assert short.public() == full.public()
    assert short.public().hex() == ALICE_PUBLIC_HEX


def test_hex_seed_uri():
    pair, seed = from_string_with_seed(ed25519, "0x" + DEV_SEED_HEX)
    root, _ = from_phrase(ed25519, DEV_PHRASE)
    assert seed.hex() == DEV_SEED_HEX
    assert pair.public() == root.public()


def test_hard_derivation_keeps_seed_for_ed25519_only():
    _, ed_seed = from_string_with_seed(ed25519, "//Alice")
    _, sr_seed = from_string_with_seed(sr25519, "//Alice")
    assert ed_seed is not None and len(ed_seed) == 32
    assert sr_seed is None


def test_soft_derivation():
    soft, _ = from_string_with_seed(sr25519, "//Alice/0")
    hard, _ = from_string_with_seed(sr25519, "//Alice//0")
    assert soft.public() != hard.public()
    with pytest.raises(UnsupportedDerivation):
        from_string_with_seed(ed25519, "//Alice/0")
    with pytest.raises(UnsupportedDerivation):
        from_string_with_seed(ecdsa, "/soft")


def test_public_from_string():
    public, network = public_from_string(sr25519, ALICE)
    assert public.hex() == ALICE_PUBLIC_HEX
    assert network == 42


def test_public_from_string_rejects_wrong_length_for_scheme():
    with pytest.raises(InvalidKeyMaterial):
        public_from_string(ecdsa, ALICE)


def test_derive_tries_phrase_then_uri_then_public():
    by_phrase = derive(sr25519, DEV_PHRASE)
    assert isinstance(by_phrase, DerivedPair) and by_phrase.from_phrase
    by_uri = derive(sr25519, "//Alice")
    assert isinstance(by_uri, DerivedPair) and not by_uri.from_phrase
    by_public = derive(sr25519, ALICE)
    assert isinstance(by_public, DerivedPublic)
    assert by_public.public().hex() == ALICE_PUBLIC_HEX


@pytest.mark.parametrize("uri", ["not a phrase at all", "0x1234", "//", "5Grwva"])
def test_derive_fails_without_partial_result(uri):
    with pytest.raises(InvalidKeyMaterial):
        derive(sr25519, uri)


def test_derivation_is_stable():
    first = derive(ecdsa, DEV_PHRASE + "//Bob")
    second = derive(ecdsa, DEV_PHRASE + "//Bob")
    assert first.pair.account_id() == second.pair.account_id()
    assert first.pair.to_address() == second.pair.to_address()


def test_pair_from_suri_rejects_public_addresses():
    with pytest.raises(InvalidKeyMaterial):
        pair_from_suri(sr25519, ALICE)


def test_wipe_zeroes_and_blocks_signing():
    pair = pair_from_suri(ed25519, "//Alice")
    secret = pair._secret
    pair.wipe()
    assert pair.is_wiped
    assert secret == bytearray(len(secret))
    with pytest.raises(KeytoolError):
        pair.sign(b"message")


def test_secret_scope_wipes_on_error():
    pair = pair_from_suri(sr25519, "//Alice")
    with pytest.raises(RuntimeError):
        with secret_scope(pair):
            raise RuntimeError("boom")
    assert pair.is_wiped


def test_secret_scope_wipes_derived_pair():
    derived = derive(sr25519, DEV_PHRASE)
    with secret_scope(derived) as inner:
        assert inner.pair.sign(b"x")
    assert derived.pair.is_wiped


def test_read_uri_from_file(tmp_path):
    path = tmp_path / "suri"
    path.write_text("//Alice\n\n")
    assert read_uri(str(path)) == "//Alice"


def test_read_uri_literal():
    assert read_uri("//Bob") == "//Bob"


def test_read_uri_prompts(monkeypatch):
    monkeypatch.setattr("modnet_keys.keys.getpass", lambda prompt: "//Charlie")
    assert read_uri(None) == "//Charlie"


def test_get_password():
    assert get_password("pw") == "pw"
    assert get_password(None, required=False) is None
    with pytest.raises(MissingPassword):
        get_password(None)


def test_get_password_interactive(monkeypatch):
    monkeypatch.setattr("modnet_keys.keys.getpass", lambda prompt: "typed")
    assert get_password("ignored", interactive=True) == "typed"


def test_generate_mnemonic():
    phrase = generate_mnemonic(24)
    assert len(phrase.split()) == 24
    assert isinstance(derive(sr25519, phrase), DerivedPair)
    with pytest.raises(InvalidKeyMaterial):
        generate_mnemonic(13)


def test_key_pair_repr_hides_secret():
    pair = KeyPair.from_seed(ed25519, bytes.fromhex(DEV_SEED_HEX))
    assert DEV_SEED_HEX not in repr(pair)


def test_read_uri_rejects_undecodable_file(tmp_path):
    path = tmp_path / "suri"
    path.write_bytes(b"\xff\xfe//Alice")
    with pytest.raises(FileAccessError):
        read_uri(str(path))


def test_empty_password_overrides_embedded_one():
    embedded, _ = from_string_with_seed(ed25519, DEV_PHRASE + "///secret")
    overridden, _ = from_string_with_seed(ed25519, DEV_PHRASE + "///secret", "")
    plain, _ = from_string_with_seed(ed25519, DEV_PHRASE)
    assert overridden.public() == plain.public()
    assert overridden.public() != embedded.public()
