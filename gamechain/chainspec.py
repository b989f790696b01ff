"""Chain specifications for the solo chain and the Bajun parachain."""

from __future__ import annotations

import enum
import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from gamechain.primitives import AccountId

SOLO_TOKEN_SYMBOL = "AJUN"
SOLO_TOKEN_DECIMALS = 12
SOLO_SS58_FORMAT = 42
AJUNS = 10**SOLO_TOKEN_DECIMALS

BAJUN_TOKEN_SYMBOL = "BAJU"
BAJUN_TOKEN_DECIMALS = 12
BAJUN_SS58_FORMAT = 1337
BAJUN_PARA_ID = 2119
BAJUN_RELAY_CHAIN = "rococo-local"
SAFE_XCM_VERSION = 2
BAJUN_ENDOWMENT = 1 << 60

_MAX_U16 = 2**16 - 1
_MAX_U32 = 2**32 - 1

TESTNET_AURA_AUTHORITY = "c0db660b24bcf1b717a3a3e992cdd6d76710230848e664ddb4a06c1721df7c55"
TESTNET_GRANDPA_AUTHORITY = "79a3d774934ac9660dd62e32b35679456d8836d61dc8537068d0559c0f4b566f"


class ChainType(enum.Enum):
    """The kind of network a chain specification describes."""

    DEVELOPMENT = "Development"
    LOCAL = "Local"
    LIVE = "Live"


@dataclass(frozen=True)
class Extensions:
    """Parachain extensions: the relay chain and the parachain id."""

    relay_chain: str
    para_id: int

    def __post_init__(self) -> None:
        if not isinstance(self.relay_chain, str):
            raise TypeError("relay_chain must be a string")
        if not isinstance(self.para_id, int) or isinstance(self.para_id, bool):
            raise TypeError("para_id must be an integer")
        if not 0 <= self.para_id <= _MAX_U32:
            raise ValueError(f"para_id {self.para_id} out of range")

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Extensions":
        """Build from a mapping, rejecting unknown or missing fields."""
        known = {"relay_chain", "para_id"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown extension fields: {sorted(unknown)}")
        missing = known - set(data)
        if missing:
            raise ValueError(f"missing extension fields: {sorted(missing)}")
        return Extensions(relay_chain=data["relay_chain"], para_id=data["para_id"])

    def to_dict(self) -> Dict[str, Any]:
        """The extension fields as a mapping."""
        return {"relay_chain": self.relay_chain, "para_id": self.para_id}


def _public_from_seed(seed: str, scheme: str) -> AccountId:
    # Deterministic development key for the derivation path "//<seed>".
    digest = hashlib.blake2b(
        f"//{seed}".encode("utf-8"), digest_size=32, person=scheme.encode("ascii")
    ).digest()
    return AccountId(digest)


def _account_id_from_seed(seed: str) -> AccountId:
    return _public_from_seed(seed, "sr25519")


def _collator_keys_from_seed(seed: str) -> AccountId:
    return _public_from_seed(seed, "sr25519")


AuthorityPublicKey = Tuple[AccountId, Tuple[AccountId, int]]


def _authority_keys_from_seed(seed: str) -> AuthorityPublicKey:
    return (_public_from_seed(seed, "sr25519"), (_public_from_seed(seed, "ed25519"), 1))


@dataclass(frozen=True)
class WellKnownAccounts:
    """Development accounts, their stashes and authority keys."""

    alice: AccountId
    bob: AccountId
    charlie: AccountId
    dave: AccountId
    eve: AccountId
    ferdie: AccountId
    alice_stash: AccountId
    bob_stash: AccountId
    charlie_stash: AccountId
    dave_stash: AccountId
    eve_stash: AccountId
    ferdie_stash: AccountId
    alice_authority: AuthorityPublicKey
    bob_authority: AuthorityPublicKey
    charlie_authority: AuthorityPublicKey


def get_well_known_accounts() -> WellKnownAccounts:
    """Return the development accounts derived from their well-known seeds."""
    return WellKnownAccounts(
        alice=_account_id_from_seed("Alice"),
        bob=_account_id_from_seed("Bob"),
        charlie=_account_id_from_seed("Charlie"),
        dave=_account_id_from_seed("Dave"),
        eve=_account_id_from_seed("Eve"),
        ferdie=_account_id_from_seed("Ferdie"),
        alice_stash=_account_id_from_seed("Alice//stash"),
        bob_stash=_account_id_from_seed("Bob//stash"),
        charlie_stash=_account_id_from_seed("Charlie//stash"),
        dave_stash=_account_id_from_seed("Dave//stash"),
        eve_stash=_account_id_from_seed("Eve//stash"),
        ferdie_stash=_account_id_from_seed("Ferdie//stash"),
        alice_authority=_authority_keys_from_seed("Alice"),
        bob_authority=_authority_keys_from_seed("Bob"),
        charlie_authority=_authority_keys_from_seed("Charlie"),
    )


def chain_spec_properties(symbol: str, decimal: int, address_prefix: int) -> Dict[str, Any]:
    """Token symbol, decimals and address format for a chain specification."""
    for name, value in (("decimal", decimal), ("address_prefix", address_prefix)):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"{name} must be an integer")
        if not 0 <= value <= _MAX_U16:
            raise ValueError(f"{name} {value} out of range 0..={_MAX_U16}")
    return {"tokenSymbol": symbol, "tokenDecimals": decimal, "ss58Format": address_prefix}


@dataclass
class ChainSpec:
    """A named chain with its genesis configuration and metadata."""

    name: str
    id: str
    chain_type: ChainType
    genesis: Dict[str, Any] = field(default_factory=dict)
    boot_nodes: List[str] = field(default_factory=list)
    telemetry_endpoints: Optional[List[Any]] = None
    protocol_id: Optional[str] = None
    fork_id: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None
    extensions: Optional[Extensions] = None

    def to_json(self) -> str:
        """Serialise to a JSON document."""
        document: Dict[str, Any] = {
            "name": self.name,
            "id": self.id,
            "chainType": self.chain_type.value,
            "bootNodes": list(self.boot_nodes),
            "telemetryEndpoints": self.telemetry_endpoints,
            "protocolId": self.protocol_id,
            "forkId": self.fork_id,
            "properties": self.properties,
        }
        if self.extensions is not None:
            document.update(self.extensions.to_dict())
        document["genesis"] = {"runtime": self.genesis}
        return json.dumps(document, indent=2)

    @staticmethod
    def from_json(text: str) -> "ChainSpec":
        """Parse a JSON document written by :meth:`to_json`."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("chain spec must be a JSON object")
        for key in ("name", "id"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"chain spec needs a string {key!r}")
        try:
            chain_type = ChainType(data.get("chainType", ChainType.LIVE.value))
        except ValueError as error:
            raise ValueError(f"unknown chain type {data.get('chainType')!r}") from error

        extension_fields = {k: data[k] for k in ("relay_chain", "para_id") if k in data}
        extensions = Extensions.from_dict(extension_fields) if extension_fields else None

        genesis = data.get("genesis", {})
        if not isinstance(genesis, dict):
            raise ValueError("genesis must be a JSON object")
        runtime = genesis.get("runtime", {})
        if not isinstance(runtime, dict):
            raise ValueError("genesis runtime must be a JSON object")

        boot_nodes = data.get("bootNodes", [])
        if not isinstance(boot_nodes, list):
            raise ValueError("bootNodes must be a list")

        return ChainSpec(
            name=data["name"],
            id=data["id"],
            chain_type=chain_type,
            genesis=runtime,
            boot_nodes=boot_nodes,
            telemetry_endpoints=data.get("telemetryEndpoints"),
            protocol_id=data.get("protocolId"),
            fork_id=data.get("forkId"),
            properties=data.get("properties"),
            extensions=extensions,
        )

    @staticmethod
    def from_json_file(path: Union[str, Path]) -> "ChainSpec":
        """Read a chain specification from a JSON file."""
        return ChainSpec.from_json(Path(path).read_text(encoding="utf-8"))


def _compose_solo_genesis(
    aura: Dict[str, Any],
    grandpa: Dict[str, Any],
    sudo: Dict[str, Any],
    observers: Dict[str, Any],
    council: Dict[str, Any],
    balances: Dict[str, Any],
    assets: Dict[str, Any],
    vesting: Dict[str, Any],
) -> Dict[str, Any]:
    return {
        "aura": aura,
        "grandpa": grandpa,
        "sudo": sudo,
        "observers": observers,
        "council": council,
        "balances": balances,
        "assets": assets,
        "vesting": vesting,
        "system": {},
        "transactionPayment": {},
        "councilMembership": {},
        "treasury": {},
        "democracy": {},
        "teerex": {"allowSgxDebugMode": True},
    }


def _solo_development_genesis() -> Dict[str, Any]:
    accounts = get_well_known_accounts()
    initial_balance = 1_000_000_000 * AJUNS
    initial_asset_balance = 1_000_000_000
    vest_balance = 123 * AJUNS
    aura_key, (grandpa_key, grandpa_weight) = accounts.alice_authority
    hex_of = AccountId.to_hex

    return _compose_solo_genesis(
        aura={"authorities": [hex_of(aura_key)]},
        grandpa={"authorities": [[hex_of(grandpa_key), grandpa_weight]]},
        sudo={"key": hex_of(accounts.alice)},
        observers={"members": [hex_of(accounts.alice)]},
        council={"members": [hex_of(a) for a in (accounts.bob, accounts.charlie, accounts.dave)]},
        balances={
            "balances": [
                [hex_of(accounts.alice), initial_balance],
                [hex_of(accounts.bob), initial_balance],
                [hex_of(accounts.charlie), initial_balance],
                [hex_of(accounts.dave), vest_balance],
                [hex_of(accounts.eve), vest_balance],
                [hex_of(accounts.ferdie), vest_balance],
                [hex_of(accounts.alice_stash), initial_balance],
                [hex_of(accounts.bob_stash), initial_balance],
            ]
        },
        assets={
            "assets": [[0, hex_of(accounts.alice), True, 1]],
            "metadata": [[0, "Dotmog", "DMOG", 3]],
            "accounts": [
                [0, hex_of(accounts.alice), initial_asset_balance],
                [0, hex_of(accounts.bob), initial_asset_balance],
                [0, hex_of(accounts.charlie), initial_asset_balance],
            ],
        },
        vesting={
            "vesting": [
                [hex_of(accounts.alice), 0, 1, 10, vest_balance],
                [hex_of(accounts.bob), 0, 2, 10, vest_balance],
                [hex_of(accounts.charlie), 0, 3, 12, vest_balance],
                [hex_of(accounts.dave), 9, 10, 1, vest_balance],
                [hex_of(accounts.eve), 19, 20, 1, vest_balance],
                [hex_of(accounts.ferdie), 29, 30, 1, vest_balance],
            ]
        },
    )


def _solo_testnet_genesis() -> Dict[str, Any]:
    accounts = get_well_known_accounts()
    initial_balance = 1_000_000_000 * AJUNS
    endowed = (
        accounts.alice, accounts.bob, accounts.charlie, accounts.dave,
        accounts.eve, accounts.ferdie, accounts.alice_stash, accounts.bob_stash,
        accounts.charlie_stash, accounts.dave_stash, accounts.eve_stash,
        accounts.ferdie_stash,
    )
    return _compose_solo_genesis(
        aura={"authorities": ["0x" + TESTNET_AURA_AUTHORITY]},
        grandpa={"authorities": [["0x" + TESTNET_GRANDPA_AUTHORITY, 1]]},
        sudo={"key": accounts.alice.to_hex()},
        observers={"members": []},
        council={"members": []},
        balances={"balances": [[account.to_hex(), initial_balance] for account in endowed]},
        assets={"assets": [], "metadata": [], "accounts": []},
        vesting={"vesting": []},
    )


def solo_development_config(chain_type: ChainType) -> ChainSpec:
    """Development or local chain specification for the solo chain."""
    names = {
        ChainType.LOCAL: "Ajuna Local Testnet",
        ChainType.DEVELOPMENT: "Ajuna Dev Testnet",
    }
    name = names.get(chain_type)
    if name is None:
        raise ValueError("Call dedicated functions for other chain types.")
    return ChainSpec(
        name=name,
        id=name.lower().replace(" ", "_"),
        chain_type=chain_type,
        genesis=_solo_development_genesis(),
        protocol_id=name.lower().replace(" ", "-"),
        properties=chain_spec_properties(SOLO_TOKEN_SYMBOL, SOLO_TOKEN_DECIMALS, SOLO_SS58_FORMAT),
    )


def solo_testnet_config() -> ChainSpec:
    """Live testnet chain specification for the solo chain."""
    return ChainSpec(
        name="Ajuna Testnet",
        id="ajuna_testnet",
        chain_type=ChainType.LIVE,
        genesis=_solo_testnet_genesis(),
        protocol_id="ajuna-testnet",
        properties=chain_spec_properties(SOLO_TOKEN_SYMBOL, SOLO_TOKEN_DECIMALS, SOLO_SS58_FORMAT),
    )


_BAJUN_ENDOWED_SEEDS = (
    "Alice", "Bob", "Charlie", "Dave", "Eve", "Ferdie",
    "Alice//stash", "Bob//stash", "Charlie//stash", "Dave//stash",
    "Eve//stash", "Ferdie//stash",
)


def _bajun_genesis(invulnerables: List[Tuple[AccountId, AccountId]],
                   endowed_accounts: List[AccountId]) -> Dict[str, Any]:
    return {
        "system": {},
        "balances": {
            "balances": [[account.to_hex(), BAJUN_ENDOWMENT] for account in endowed_accounts]
        },
        "sudo": {"key": _account_id_from_seed("Alice").to_hex()},
        "vesting": {"vesting": []},
        "council": {"members": []},
        "councilMembership": {},
        "treasury": {},
        "parachainInfo": {"parachainId": BAJUN_PARA_ID},
        "collatorSelection": {
            "invulnerables": [account.to_hex() for account, _ in invulnerables],
            "candidacyBond": 0,
        },
        "session": {
            "keys": [
                [account.to_hex(), account.to_hex(), {"aura": aura.to_hex()}]
                for account, aura in invulnerables
            ]
        },
        "aura": {},
        "auraExt": {},
        "parachainSystem": {},
        "polkadotXcm": {"safeXcmVersion": SAFE_XCM_VERSION},
    }


def _bajun_spec(name: str, spec_id: str, chain_type: ChainType, protocol_id: str) -> ChainSpec:
    invulnerables = [
        (_account_id_from_seed(seed), _collator_keys_from_seed(seed)) for seed in ("Alice", "Bob")
    ]
    endowed = [_account_id_from_seed(seed) for seed in _BAJUN_ENDOWED_SEEDS]
    return ChainSpec(
        name=name,
        id=spec_id,
        chain_type=chain_type,
        genesis=_bajun_genesis(invulnerables, endowed),
        protocol_id=protocol_id,
        properties=chain_spec_properties(
            BAJUN_TOKEN_SYMBOL, BAJUN_TOKEN_DECIMALS, BAJUN_SS58_FORMAT
        ),
        extensions=Extensions(relay_chain=BAJUN_RELAY_CHAIN, para_id=BAJUN_PARA_ID),
    )


def bajun_development_config() -> ChainSpec:
    """Development chain specification for the Bajun parachain."""
    return _bajun_spec("Bajun Dev", "bajun-dev", ChainType.DEVELOPMENT, "bajun-dev")


def bajun_local_testnet_config() -> ChainSpec:
    """Local testnet chain specification for the Bajun parachain."""
    return _bajun_spec("Bajun Local Testnet", "local_testnet", ChainType.LOCAL, "bajun-local")