"""Account reports: public key, account id and SS58 address for a derived key."""

import logging
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .console import print_json, print_line
from .errors import InvalidKeyMaterial
from .hexutil import encode_hex
from .keys import DerivedPair, DerivedPublic, derive, secret_scope
from .schemes import CryptoSchemeImpl

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "n/a"
INVALID_URI_MESSAGE = "Invalid phrase/URI given"


class OutputType(str, Enum):
    JSON = "json"
    TEXT = "text"

    def __str__(self) -> str:
        return self.value


class InputKind(str, Enum):
    PHRASE = "secretPhrase"
    SECRET_URI = "secretKeyUri"
    PUBLIC_URI = "publicKeyUri"


_TEXT_HEADERS = {
    InputKind.PHRASE: "Secret phrase",
    InputKind.SECRET_URI: "Secret Key URI",
    InputKind.PUBLIC_URI: "Public Key URI",
}


class AccountReport(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    input_kind: InputKind = Field(exclude=True)
    uri: str = Field(exclude=True)
    network_id: Optional[int] = Field(default=None, alias="networkId")
    secret_seed: str = Field(alias="secretSeed")
    public_key: str = Field(alias="publicKey")
    account_id: str = Field(alias="accountId")
    ss58_address: str = Field(alias="ss58Address")

    def to_json(self) -> dict:
        data = {self.input_kind.value: self.uri}
        data.update(self.model_dump(by_alias=True, exclude_none=True))
        return data

    def to_text(self) -> str:
        rows = []
        if self.network_id is not None:
            rows.append(("Network ID/version", str(self.network_id)))
        rows += [
            ("Secret seed", self.secret_seed),
            ("Public key (hex)", self.public_key),
            ("Account ID", self.account_id),
            ("SS58 Address", self.ss58_address),
        ]
        width = max(len(label) for label, _ in rows) + 2
        lines = [f"{_TEXT_HEADERS[self.input_kind]} `{self.uri}` is account:"]
        lines += [f"  {(label + ':').ljust(width)}{value}" for label, value in rows]
        return "\n".join(lines)


def build_report(
    scheme: CryptoSchemeImpl,
    uri: str,
    derived: Union[DerivedPair, DerivedPublic],
    network_override: Optional[int] = None,
) -> AccountReport:
    public = derived.public()
    if isinstance(derived, DerivedPublic):
        network = derived.network if network_override is None else network_override
        return AccountReport(
            input_kind=InputKind.PUBLIC_URI,
            uri=uri,
            network_id=network,
            secret_seed=NOT_APPLICABLE,
            public_key=encode_hex(public),
            account_id=encode_hex(scheme.account_id(public)),
            ss58_address=scheme.to_address(public, network),
        )
    kind = InputKind.PHRASE if derived.from_phrase else InputKind.SECRET_URI
    return AccountReport(
        input_kind=kind,
        uri=uri,
        secret_seed=encode_hex(derived.seed) if derived.seed is not None else NOT_APPLICABLE,
        public_key=encode_hex(public),
        account_id=encode_hex(scheme.account_id(public)),
        ss58_address=scheme.to_address(public, network_override),
    )


def inspect_uri(
    scheme: CryptoSchemeImpl,
    uri: str,
    password: Optional[str] = None,
    network_override: Optional[int] = None,
) -> AccountReport:
    """Derive ``uri`` and build its report; raises :class:`InvalidKeyMaterial`."""
    with secret_scope(derive(scheme, uri, password)) as derived:
        return build_report(scheme, uri, derived, network_override)


def print_report(report: AccountReport, output: OutputType) -> None:
    if output == OutputType.JSON:
        print_json(report.to_json())
    else:
        print_line(report.to_text())


def print_from_uri(
    scheme: CryptoSchemeImpl,
    uri: str,
    password: Optional[str] = None,
    network_override: Optional[int] = None,
    output: OutputType = OutputType.TEXT,
) -> Optional[AccountReport]:
    """Print the account report for ``uri``.

    Unrecognised input prints ``Invalid phrase/URI given`` and returns None.
    """
    try:
        report = inspect_uri(scheme, uri, password, network_override)
    except InvalidKeyMaterial:
        print_line(INVALID_URI_MESSAGE)
        return None
    logger.debug("Derived %s account %s", scheme.name, report.ss58_address)
    print_report(report, output)
    return report
