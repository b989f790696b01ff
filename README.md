# gamechain

Building blocks for running turn-based games on a chain-style runtime, kept in memory:

- `gamechain.matchmaker.MatchMaking`: players queue in numbered brackets and are matched
  first in, first out. An account can be queued in only one bracket at a time.
- `gamechain.runner.Running`: runners move from queued to accepted to finished.
  Identifiers come from an `IdentifierSource` such as `NonceIdentifier` (1, 2, 3, ...) or
  `FixedIdentifier` (always the same value).
- `gamechain.board.Board`: runs one turn-based game per board id. Each player sits at one
  board at a time until `finish_game` frees them; a winner and the game's seed are recorded.
  `gamechain.guessing.GuessingGame` is a two-player game for it: the first player to guess
  42 wins.
- `gamechain.gameregistry.GameRegistry`: players queue, two are matched, a runner is created
  holding the encoded `Game`, an observer acknowledges the batch with `ack_game` and
  reports the winner with `finish_game`.
- `gamechain.chainspec`: chain specifications for the solo chain
  (`solo_development_config`, `solo_testnet_config`) and the Bajun parachain
  (`bajun_development_config`, `bajun_local_testnet_config`), with JSON read and write
  through `ChainSpec.to_json`, `ChainSpec.from_json` and `ChainSpec.from_json_file`.
- `gamechain.codec`: the compact little-endian binary encoding used for stored games
  (`encode_compact`, `encode_uint`, `encode_option`, `encode_vec` and their decoders).
- `gamechain.primitives`: `AccountId` (32 bytes, with `from_hex` / `to_hex`) and range checks
  for block numbers and balances.

Failures are raised as exceptions: `RunnerError`, `BoardError` and `RegistryError`, each
carrying a `kind` enum, all subclasses of `gamechain.common.DispatchError`. A call made with
`None` as the sender raises `DispatchError`. Components record what happened in a
`gamechain.common.EventLog`, which can be shared between them.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

Wire the registry together around one event log:

```python
from gamechain.common import EventLog
from gamechain.matchmaker import MatchMaking
from gamechain.runner import Running, NonceIdentifier
from gamechain.gameregistry import GameRegistry

events = EventLog()
registry = GameRegistry(
    MatchMaking(events),
    Running(events),
    NonceIdentifier(),
    max_acknowledge_batch=2,
)

registry.queue(1)
registry.queue(2)            # two players are matched and game 1 is queued
game_id = registry.player_game(1)

registry.ack_game(7, registry.queued(), shard_id=None)
registry.finish_game(7, game_id, winner=1, shard_id=None)
print(events.last())         # StateFinished(runner_id=1)
```

A board runs one turn-based game per board id:

```python
from gamechain.board import Board
from gamechain.common import EventLog
from gamechain.guessing import GuessingGame

events = EventLog()
board = Board(GuessingGame(), max_players=2, events=events)
board.new_game(sender=1, board_id=1, players={2, 3})
board.play_turn(2, 42)       # the right guess wins
print(board.winner(1))       # 2
board.finish_game(1, 1)      # frees the players for another game
```

## Command line

```
gamechain --help
```

Options:

- `--runtime {solo,bajun}`: the chain to work with (default `solo`).
- `--chain ID`: a built-in spec id or the path of a JSON chain spec. Solo knows `dev`,
  `testnet`, `local` and the empty id (local); Bajun knows `dev`, `local` and the empty id
  (local).
- `--dev`: use `dev` when no `--chain` is given.
- `--base-path PATH`: data directory; for Bajun the relay chain path is `PATH/polkadot`.

Without a subcommand, `gamechain` prints the node name and the chain's name and id; for
Bajun also the parachain id, the relay chain, and the relay chain base path if one is set.
With `--runtime bajun`, arguments after `--` are taken as relay chain arguments; a
`--chain` among them overrides the relay chain named in the spec.

`gamechain build-spec [--chain ID] [--output FILE]` writes the chain spec as JSON to
standard output or to the file.

The exit status is 1, with a message on standard error, when a spec cannot be loaded or
written.

## What this package does not do

- It does not run a node. There is no networking, consensus, block production, block
  import or export, state export, chain purging, reverting, key management or
  benchmarking; the command line only loads, summarises and writes chain specifications.
- Nothing is stored on disk: matchmaking queues, runners, boards and the registry live in
  memory for the life of the objects.
- The development accounts in the chain specifications are deterministic 32-byte values
  hashed from the well-known seed names. They are not real sr25519 or ed25519 public keys
  and cannot sign anything. Genesis sections hold JSON data only; no runtime code is
  included.