from pathlib import Path

import pytest

from gamechain.chainspec import ChainSpec, ChainType, solo_testnet_config
from gamechain.cli import (
    CliError,
    RelayChainCli,
    Variant,
    build_parser,
    impl_name,
    load_spec,
    main,
)


def test_impl_name_per_variant():
    assert impl_name(Variant.BAJUN) == "Bajun Node"
    assert impl_name(Variant.SOLO) == "Ajuna Node"
    assert impl_name(None) == "Ajuna Node"


@pytest.mark.parametrize(
    "spec_id, name",
    [
        ("dev", "Ajuna Dev Testnet"),
        ("testnet", "Ajuna Testnet"),
        ("", "Ajuna Local Testnet"),
        ("local", "Ajuna Local Testnet"),
    ],
)
def test_load_spec_solo_builtins(spec_id, name):
    assert load_spec(spec_id, Variant.SOLO).name == name


@pytest.mark.parametrize(
    "spec_id, name",
    [("dev", "Bajun Dev"), ("", "Bajun Local Testnet"), ("local", "Bajun Local Testnet")],
)
def test_load_spec_bajun_builtins(spec_id, name):
    assert load_spec(spec_id, "bajun").name == name


def test_load_spec_solo_dev_chain_type():
    assert load_spec("dev", Variant.SOLO).chain_type is ChainType.DEVELOPMENT


def test_load_spec_requires_variant():
    with pytest.raises(CliError, match="must be specified"):
        load_spec("dev", None)


def test_load_spec_unknown_variant():
    with pytest.raises(CliError):
        load_spec("dev", "other")


def test_load_spec_from_file(tmp_path):
    path = tmp_path / "spec.json"
    original = solo_testnet_config()
    path.write_text(original.to_json(), encoding="utf-8")
    loaded = load_spec(str(path), Variant.SOLO)
    assert loaded.id == original.id
    assert loaded.genesis == original.genesis


def test_load_spec_missing_file(tmp_path):
    with pytest.raises(CliError):
        load_spec(str(tmp_path / "absent.json"), Variant.SOLO)


def test_relay_chain_id_prefers_explicit():
    relay = RelayChainCli(chain_id_hint="rococo-local")
    assert relay.chain_id("") == "rococo-local"
    assert relay.chain_id("westend") == "westend"
    assert RelayChainCli().chain_id("") == ""


def test_relay_default_ports():
    assert RelayChainCli.default_ports() == {
        "p2p": 30334,
        "rpc_ws": 9945,
        "rpc_http": 9934,
        "prometheus": 9616,
    }


def test_build_parser_prog_and_subcommand():
    parser = build_parser(Variant.BAJUN)
    assert parser.prog == "bajun-node"
    args = parser.parse_args(["build-spec", "--chain", "dev"])
    assert args.command == "build-spec"
    assert args.chain == "dev"


def test_main_build_spec_stdout_round_trip(capsys):
    assert main(["build-spec", "--chain", "testnet"]) == 0
    spec = ChainSpec.from_json(capsys.readouterr().out)
    assert spec.id == "ajuna_testnet"


def test_main_build_spec_output_file(tmp_path):
    out = tmp_path / "out.json"
    assert main(["--runtime", "bajun", "build-spec", "--chain", "dev", "--output", str(out)]) == 0
    spec = ChainSpec.from_json_file(out)
    assert spec.id == "bajun-dev"
    assert spec.extensions.para_id == 2119


def test_main_dev_flag(capsys):
    assert main(["--dev", "build-spec"]) == 0
    assert ChainSpec.from_json(capsys.readouterr().out).chain_type is ChainType.DEVELOPMENT


def test_main_summary_bajun_with_relay_args(capsys, tmp_path):
    code = main(["--runtime", "bajun", "--base-path", str(tmp_path), "--", "--chain", "westend"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Bajun Node" in out
    assert "Parachain id: 2119" in out
    assert "Relay chain: westend" in out
    assert str(Path(tmp_path) / "polkadot") in out


def test_main_summary_bajun_default_relay(capsys):
    assert main(["--runtime", "bajun"]) == 0
    assert "Relay chain: rococo-local" in capsys.readouterr().out


def test_main_bajun_spec_without_extensions(tmp_path, capsys):
    path = tmp_path / "solo.json"
    path.write_text(solo_testnet_config().to_json(), encoding="utf-8")
    assert main(["--runtime", "bajun", "--chain", str(path)]) == 1
    assert "parachain ID" in capsys.readouterr().err


def test_main_missing_spec_file(tmp_path, capsys):
    assert main(["build-spec", "--chain", str(tmp_path / "none.json")]) == 1
    assert capsys.readouterr().err.startswith("Error:")