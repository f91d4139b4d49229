"""
Key tools for Modnet nodes and accounts.

- Inspect a phrase, secret URI or SS58 address (public key, account id, address).
- Generate mnemonics and network node keys.
- Sign messages and transactions with sr25519, ed25519 or ecdsa keys.
- Insert keys into a running node's keystore over JSON-RPC.

Usage examples:
  # Inspect the development account
  modnet-keys inspect "//Alice" --scheme sr25519

  # Same, as JSON with a custom network prefix
  modnet-keys inspect "//Alice" --network 2 --output-type json

  # Sign a hex message
  modnet-keys sign --suri "//Alice" --password "" --hex --message 0xdeadbeef

  # Sign a pre-encoded call with nonce 0
  modnet-keys sign-transaction --suri "//Alice" --password "" --nonce 0 --call 0x0000

  # Insert a GRANDPA key into the local node
  modnet-keys insert --suri ./grandpa.suri --key-type gran --scheme ed25519 --password ""

Environment:
  MODNET_NODE_URL, MODNET_NETWORK, MODNET_SPEC_VERSION, MODNET_TX_VERSION,
  MODNET_GENESIS_HASH and MODNET_LOG_LEVEL replace the built-in defaults.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from rich_argparse import RichHelpFormatter

from .account import OutputType, print_from_uri
from .config import KeytoolConfig
from .console import err_console, print_error, print_line, setup_logging
from .errors import FileAccessError, KeytoolError, TransportError
from .extrinsic import NodeTemplateAdapter, sign_transaction
from .hexutil import decode_hex, encode_hex, read_message
from .keys import generate_mnemonic, get_password, pair_from_suri, read_uri, secret_scope
from .node_key import generate_node_key
from .rpc import KeystoreClient, validate_key_type
from .schemes import CryptoScheme, CryptoSchemeImpl, with_crypto_scheme

logger = logging.getLogger(__name__)


def _print_account(scheme: CryptoSchemeImpl, uri: str, args, config: KeytoolConfig) -> None:
    password = get_password(args.password, args.password_interactive, required=False)
    print_from_uri(scheme, uri, password, config.network, args.output_type)


def cmd_inspect(args, config: KeytoolConfig) -> int:
    """Handle `inspect`: show public key, account id and address for a URI."""
    uri = read_uri(args.uri)
    with_crypto_scheme(args.scheme, _print_account, uri, args, config)
    return 0


def cmd_generate(args, config: KeytoolConfig) -> int:
    """Handle `generate`: create a mnemonic and show its account."""
    phrase = generate_mnemonic(args.words)
    with_crypto_scheme(args.scheme, _print_account, phrase, args, config)
    return 0


def cmd_generate_node_key(args, config: KeytoolConfig) -> int:
    """Handle `generate-node-key`: print the peer id to stderr and the secret to stdout or a file."""
    secret, peer_id = generate_node_key()
    err_console.print(peer_id, highlight=False)
    if args.file:
        try:
            with open(args.file, "w") as file:
                file.write(secret.hex())
        except OSError as e:
            raise FileAccessError(f"Cannot write node key to {args.file}: {e}") from e
    else:
        print_line(secret.hex())
    return 0


def _sign(scheme: CryptoSchemeImpl, suri: str, password: Optional[str], message: bytes) -> bytes:
    with secret_scope(pair_from_suri(scheme, suri, password)) as pair:
        return pair.sign(message)


def cmd_sign(args, config: KeytoolConfig) -> int:
    """Handle `sign`: sign a message and print the signature as hex."""
    message = read_message(args.message, args.hex)
    suri = read_uri(args.suri)
    password = get_password(args.password, args.password_interactive)
    signature = with_crypto_scheme(args.scheme, _sign, suri, password, message)
    print_line(encode_hex(signature))
    return 0


def _sign_transaction(scheme: CryptoSchemeImpl, adapter, suri: str, password: Optional[str],
                      call: bytes, nonce: int) -> bytes:
    with secret_scope(pair_from_suri(scheme, suri, password)) as signer:
        return sign_transaction(adapter, call, nonce, signer)


def cmd_sign_transaction(args, config: KeytoolConfig) -> int:
    """Handle `sign-transaction`: sign an encoded call and print the extrinsic as hex."""
    config = config.with_overrides(
        spec_version=args.spec_version,
        transaction_version=args.tx_version,
        genesis_hash=args.genesis_hash,
    )
    adapter = NodeTemplateAdapter(config)
    nonce = adapter.parse_nonce(args.nonce)
    call = decode_hex(args.call)
    suri = read_uri(args.suri)
    password = get_password(args.password, args.password_interactive)
    extrinsic = with_crypto_scheme(args.scheme, _sign_transaction, adapter, suri, password, call, nonce)
    print_line(encode_hex(extrinsic))
    return 0


def _public_key(scheme: CryptoSchemeImpl, suri: str, password: Optional[str]) -> bytes:
    with secret_scope(pair_from_suri(scheme, suri, password)) as pair:
        return pair.public()


def cmd_insert(args, config: KeytoolConfig) -> int:
    """Handle `insert`: add a key to a node's keystore via author_insertKey."""
    key_type = validate_key_type(args.key_type)
    suri = read_uri(args.suri)
    password = get_password(args.password, args.password_interactive)
    public = with_crypto_scheme(args.scheme, _public_key, suri, password)
    node_url = args.node_url or config.node_url
    with KeystoreClient(node_url) as client:
        try:
            client.insert_key(key_type, suri, public)
        except TransportError as e:
            if args.fail_on_error:
                raise
            err_console.print(f"Error inserting key: {e}", markup=False, highlight=False)
    return 0


class HelpOnErrorParser(argparse.ArgumentParser):
    def error(self, message):
        """Override to show help text along with the error message."""
        print_error(message)
        self.print_help(sys.stderr)
        self.exit(2)


def build_parser() -> argparse.ArgumentParser:
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument("--scheme", type=CryptoScheme, choices=list(CryptoScheme), default=CryptoScheme.SR25519,
                        help="Cryptography scheme (default: sr25519)")
    shared.add_argument("--network", type=int, help="SS58 address format override (default: 42)")
    shared.add_argument("--output-type", type=OutputType, choices=list(OutputType), default=OutputType.TEXT,
                        help="Output format for account reports")
    shared.add_argument("--password",
                        help="Password used with the secret phrase; overrides a ///password in the URI, even when empty")
    shared.add_argument("--password-interactive", action="store_true", help="Prompt for the password")
    shared.add_argument("--log-level", help="Log level for diagnostics on stderr")

    p = HelpOnErrorParser(description="Key tools for Modnet", formatter_class=RichHelpFormatter)
    sub = p.add_subparsers(dest="command")

    def add(name: str, help_text: str, func):
        parser = sub.add_parser(name, help=help_text, parents=[shared], formatter_class=RichHelpFormatter)
        parser.set_defaults(func=func)
        return parser

    p_inspect = add("inspect", "Inspect a phrase, secret URI or SS58 address", cmd_inspect)
    p_inspect.add_argument("uri", nargs="?", help="Phrase, URI, address, or a file containing one (omit to be prompted)")

    p_gen = add("generate", "Generate a random mnemonic and show its account", cmd_generate)
    p_gen.add_argument("--words", type=int, default=12, help="Number of words: 12, 15, 18, 21 or 24")

    p_node = add("generate-node-key", "Generate a random network node key", cmd_generate_node_key)
    p_node.add_argument("--file", help="Write the secret key to this file instead of stdout")

    p_sign = add("sign", "Sign a message with a secret key", cmd_sign)
    p_sign.add_argument("--suri", help="Secret key URI, or a file containing it (omit to be prompted)")
    p_sign.add_argument("--message", help="Message to sign (omit to read from stdin)")
    p_sign.add_argument("--hex", action="store_true", help="The message is hex-encoded data")

    p_tx = add("sign-transaction", "Sign an encoded call; prints the signed extrinsic as hex", cmd_sign_transaction)
    p_tx.add_argument("--suri", required=True, help="Secret key URI, or a file containing it")
    p_tx.add_argument("--nonce", required=True, help="Account nonce (decimal)")
    p_tx.add_argument("--call", required=True, help="The call, hex-encoded")
    p_tx.add_argument("--spec-version", type=int, help="Runtime spec version")
    p_tx.add_argument("--tx-version", type=int, help="Runtime transaction version")
    p_tx.add_argument("--genesis-hash", help="0x-prefixed genesis block hash")

    p_insert = add("insert", "Insert a key into the keystore of a node", cmd_insert)
    p_insert.add_argument("--suri", help="Secret key URI, or a file containing it (omit to be prompted)")
    p_insert.add_argument("--key-type", required=True, help='Key type, e.g. "gran" or "imon"')
    p_insert.add_argument("--node-url", help="Node JSON-RPC endpoint (default: http://localhost:9933)")
    p_insert.add_argument("--fail-on-error", action="store_true", help="Exit non-zero when the node cannot be reached")

    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint for key utilities."""
    p = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        p.print_help()
        return 2

    args = p.parse_args(argv)
    if not hasattr(args, "func"):
        p.print_help()
        return 2
    try:
        config = KeytoolConfig.from_env().with_overrides(log_level=args.log_level, network=args.network)
        setup_logging(config.log_level)
        logger.debug("Running %s with scheme %s", args.command, args.scheme)
        return args.func(args, config)
    except KeytoolError as e:
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
