"""Command line entry point for the solo chain and the Bajun parachain node."""

from __future__ import annotations

import argparse
import enum
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from gamechain.chainspec import (
    ChainSpec,
    ChainType,
    bajun_development_config,
    bajun_local_testnet_config,
    solo_development_config,
    solo_testnet_config,
)


class Variant(enum.Enum):
    """The runtime a node is built for."""

    SOLO = "solo"
    BAJUN = "bajun"


class CliError(Exception):
    """A command could not be carried out."""


@dataclass
class RelayChainCli:
    """Relay chain parameters derived from the parachain configuration."""

    chain_id_hint: Optional[str] = None
    base_path: Optional[Path] = None
    args: List[str] = field(default_factory=list)

    def chain_id(self, base_chain_id: str = "") -> str:
        """The relay chain id: the explicit one if given, else the spec's relay chain."""
        if base_chain_id:
            return base_chain_id
        return self.chain_id_hint or ""

    @staticmethod
    def default_ports() -> Dict[str, int]:
        """Default listen ports of the relay chain node."""
        return {
            "p2p": 30334,
            "rpc_ws": 9945,
            "rpc_http": 9934,
            "prometheus": 9616,
        }


def _relay_chain_cli(spec: ChainSpec, base_path: Optional[Path],
                     relay_chain_args: Sequence[str]) -> RelayChainCli:
    chain_id = spec.extensions.relay_chain if spec.extensions is not None else None
    relay_base = base_path / "polkadot" if base_path is not None else None
    return RelayChainCli(chain_id_hint=chain_id, base_path=relay_base,
                         args=list(relay_chain_args))


def _as_variant(variant: Union[Variant, str, None]) -> Optional[Variant]:
    if variant is None or isinstance(variant, Variant):
        return variant
    try:
        return Variant(variant)
    except ValueError as error:
        raise CliError(f"unknown runtime variant {variant!r}") from error


def load_spec(spec_id: str, variant: Union[Variant, str, None]) -> ChainSpec:
    """Resolve a chain spec id or a JSON file path for the given runtime."""
    variant = _as_variant(variant)
    if variant is None:
        raise CliError("Chain spec (solo, bajun) must be specified")
    if variant is Variant.BAJUN:
        builtin = {
            "dev": bajun_development_config,
            "": bajun_local_testnet_config,
            "local": bajun_local_testnet_config,
        }
    else:
        builtin = {
            "dev": lambda: solo_development_config(ChainType.DEVELOPMENT),
            "testnet": solo_testnet_config,
            "": lambda: solo_development_config(ChainType.LOCAL),
            "local": lambda: solo_development_config(ChainType.LOCAL),
        }
    factory = builtin.get(spec_id)
    if factory is not None:
        return factory()
    try:
        return ChainSpec.from_json_file(spec_id)
    except OSError as error:
        raise CliError(f"Error opening spec file {spec_id!r}: {error}") from error
    except ValueError as error:
        raise CliError(f"Error parsing spec file {spec_id!r}: {error}") from error


def impl_name(variant: Union[Variant, str, None]) -> str:
    """The implementation name shown for the runtime."""
    return "Bajun Node" if _as_variant(variant) is Variant.BAJUN else "Ajuna Node"


def build_parser(variant: Union[Variant, str] = Variant.SOLO) -> argparse.ArgumentParser:
    """Argument parser for the node of the given runtime."""
    variant = _as_variant(variant) or Variant.SOLO
    name = impl_name(variant)
    description = name
    if variant is Variant.BAJUN:
        description += (
            "\n\nThe command-line arguments provided first will be passed to the "
            "parachain node, while the arguments provided after -- will be passed "
            "to the relay chain node."
        )
    parser = argparse.ArgumentParser(
        prog=name.lower().replace(" ", "-"),
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--runtime", choices=[v.value for v in Variant],
                        default=variant.value, help="runtime the node is built for")
    parser.add_argument("--chain", default="", help="chain spec id or path to a JSON file")
    parser.add_argument("--dev", action="store_true", help="use the development chain")
    parser.add_argument("--base-path", type=Path, default=None, help="node data directory")

    commands = parser.add_subparsers(dest="command")
    build_spec = commands.add_parser("build-spec", help="Build a chain specification.")
    build_spec.add_argument("--chain", default=argparse.SUPPRESS,
                            help="chain spec id or path to a JSON file")
    build_spec.add_argument("--output", type=Path, default=None,
                            help="write to this file instead of stdout")
    return parser


def _split_relay_args(argv: List[str], variant: Variant) -> Tuple[List[str], List[str]]:
    if variant is Variant.BAJUN and "--" in argv:
        cut = argv.index("--")
        return argv[:cut], argv[cut + 1:]
    return argv, []


def _relay_base_chain_id(relay_args: Sequence[str]) -> str:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--chain", default="")
    known, _ = parser.parse_known_args(list(relay_args))
    return known.chain


def _spec_id(args: argparse.Namespace) -> str:
    if args.chain:
        return args.chain
    return "dev" if args.dev else ""


def _build_spec(args: argparse.Namespace, variant: Variant) -> None:
    text = load_spec(_spec_id(args), variant).to_json()
    if args.output is not None:
        try:
            args.output.write_text(text + "\n", encoding="utf-8")
        except OSError as error:
            raise CliError(f"Error writing {args.output}: {error}") from error
    else:
        sys.stdout.write(text + "\n")


def _summary(args: argparse.Namespace, variant: Variant, relay_args: List[str]) -> None:
    spec = load_spec(_spec_id(args), variant)
    lines = [impl_name(variant), f"Chain: {spec.name} ({spec.id})"]
    if variant is Variant.BAJUN:
        if spec.extensions is None:
            raise CliError("Could not find parachain ID in chain-spec.")
        relay = _relay_chain_cli(spec, args.base_path, relay_args)
        lines.append(f"Parachain id: {spec.extensions.para_id}")
        lines.append(f"Relay chain: {relay.chain_id(_relay_base_chain_id(relay_args))}")
        if relay.base_path is not None:
            lines.append(f"Relay chain base path: {relay.base_path}")
    sys.stdout.write("\n".join(lines) + "\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments and run the requested command; return an exit status."""
    argv = list(sys.argv[1:] if argv is None else argv)

    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--runtime", choices=[v.value for v in Variant], default=Variant.SOLO.value)
    known, _ = pre.parse_known_args([a for a in argv if a != "--"] if "--" not in argv
                                    else argv[:argv.index("--")])
    variant = Variant(known.runtime)

    node_args, relay_args = _split_relay_args(argv, variant)
    args = build_parser(variant).parse_args(node_args)
    variant = Variant(args.runtime)

    try:
        if args.command == "build-spec":
            _build_spec(args, variant)
        else:
            _summary(args, variant, relay_args)
    except CliError as error:
        sys.stderr.write(f"Error: {error}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())