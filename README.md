# peril

Peril is a small multiplayer strategy game. Each player spawns units on the
continents of the world and moves them around. When a player's units share
a continent with another player's units, war breaks out. This package holds
the game rules for one player's view of the game. It also holds helpers that
publish and consume game messages over an AMQP broker such as RabbitMQ,
using `pika`.

## Installation

Install the package with any Python package installer. The `test` extra
adds pytest, which you need to run the test suite.

## Modules

| Module | Contents |
| --- | --- |
| `peril.routing` | Exchange names, routing keys, `PlayingState`, `GameLog` and RFC 3339 helpers |
| `peril.gamedata` | `UnitRank`, `Unit`, `Player`, `ArmyMove`, `RecognitionOfWar`, `all_ranks()` and `all_locations()` |
| `peril.gamestate` | `GameState`, `GameError`, `MoveOutcome`, `WarOutcome`, `overlapping_location()` and `units_to_power_level()` |
| `peril.gamelogic` | Console helpers: help texts, prompts, the quit message and random log quotes |
| `peril.logs` | Appending game logs to a file |
| `peril.pubsub` | Queue declaration, publishing, consuming and acknowledgement |

## The game

Each unit has an ID, a rank and a location.

* Ranks and their power: `infantry` is 1, `cavalry` is 5 and `artillery` is 10.
* Locations: `americas`, `europe`, `africa`, `asia`, `australia` and `antarctica`.

## Using the game state

`GameState(username)` holds the local player and their units, and records
whether the game is paused. All of its access goes through a lock, so it is
safe to use from several threads.

```python
from peril.gamestate import GameError, GameState

state = GameState("alice")
state.command_spawn(["spawn", "europe", "infantry"])   # unit 1
state.command_spawn(["spawn", "europe", "artillery"])  # unit 2

move = state.command_move(["move", "asia", "1", "2"])
print(move.to_location, len(move.units))  # asia 2

state.command_status()

try:
    state.command_spawn(["spawn", "mars", "infantry"])
except GameError as exc:
    print(exc)  # error: mars is not a valid location
```

The commands behave as follows:

* `command_spawn(words)` expects `["spawn", <location>, <rank>]`. The new
  unit's ID is the current number of units plus one. It returns the new
  `Unit`.
* `command_move(words)` expects `["move", <location>, <id>, ...]`. It moves
  the given units and returns an `ArmyMove` that carries a snapshot of the
  player. It refuses to move units while the game is paused.
* `command_status()` prints whether the game is paused. When the game is not
  paused, it also lists the player's units.

Each command raises `GameError` for a bad command, location, rank or unit ID.

Messages that arrive from other players are handled with these methods:

* `handle_move(move)` returns a `MoveOutcome`:
  * `SAME_PLAYER` when the move is the player's own.
  * `MAKE_WAR` when the moving player has units in a location where this
    player also has units.
  * `SAFE` otherwise.
* `handle_pause(state)` pauses or resumes the game according to a
  `PlayingState`.
* `handle_war(recognition)` returns `(WarOutcome, winner, loser)`. It settles
  a war only for the attacking player:
  * For the defender and for any other player it returns `NOT_INVOLVED`.
  * It returns `NO_UNITS` when the two sides share no location.
  * Otherwise it compares the power of each side's units in the first shared
    location. When the attacker is stronger, the result is `YOU_WON`.
  * When the defender is stronger, the result is `OPPONENT_WON`. On equal
    power, the result is `DRAW`. In both cases the local player's units in
    that location are removed.
  * When the outcome is `NOT_INVOLVED` or `NO_UNITS`, the winner and loser
    are `None`.

These helpers are also available on their own:

```python
from peril.gamedata import Unit, UnitRank
from peril.gamestate import units_to_power_level

units = [Unit(1, UnitRank.ARTILLERY, "europe"), Unit(2, UnitRank.CAVALRY, "europe")]
print(units_to_power_level(units))  # 15
```

## Console helpers

`peril.gamelogic` provides these functions:

* `print_client_help()` and `print_server_help()` print a help text and
  return it.
* `print_quit()` prints the farewell message and returns it.
* `get_input(stream=None)` prints a `> ` prompt. It reads one line from
  `stream`, or from standard input when no stream is given, and returns the
  line's words. At end of input it returns an empty list.
* `client_welcome(stream=None)` asks for a username and returns the first
  word entered. It raises `GameError` if nothing is entered.
* `get_malicious_log()` returns a random quotation.

## Messages and the broker

The message types are `Unit`, `Player`, `ArmyMove`, `RecognitionOfWar`,
`PlayingState` and `GameLog`. Each of them converts to and from a plain
dictionary with `to_dict()` and `from_dict()`.

`peril.pubsub` works with a pika connection and its channels:

* `declare_and_bind(connection, exchange, queue_name, key, queue_type)` opens
  a channel, declares a queue and binds it to the exchange. It returns
  `(channel, queue_name)`.
  * A `SimpleQueueType.DURABLE` queue is durable.
  * A `SimpleQueueType.TRANSIENT` queue is exclusive and deleted
    automatically.
  * Every queue except `peril_dlq` sends rejected messages to the `peril_dlx`
    exchange.
  * `queue_arguments()` returns the declaration arguments that are used.
* `publish_json(channel, exchange, key, value)` publishes a persistent
  message as JSON (`application/json`).
* `publish_binary(channel, exchange, key, value)` publishes a persistent
  message as MessagePack (`application/msgpack`).
* `subscribe_json(...)` and `subscribe_binary(...)` register a consumer and
  return its channel. For each message they decode the body and pass it
  through the optional `decode` callable, such as `PlayingState.from_dict`.
  They then call your handler and settle the delivery according to the
  `AckType` the handler returns:
  * `ACK` acknowledges the message.
  * `NACK_REQUEUE` rejects it and puts it back on the queue.
  * `NACK_DISCARD` rejects it without requeueing. Any unknown value is
    treated the same way.
* A JSON message that cannot be decoded is discarded.
* A binary message that cannot be decoded cancels the consumer.
* Binary consumers use a prefetch count of 10.
* `acknowledge(channel, delivery_tag, ack_type)` settles one delivery in the
  same way. `encode_json`, `encode_binary` and `decode_binary` expose the
  encodings.

Deliveries are handled only while the connection processes events, for
example during `channel.start_consuming()`:

```python
import pika

from peril.pubsub import AckType, SimpleQueueType, subscribe_json
from peril.routing import EXCHANGE_PERIL_DIRECT, PAUSE_KEY, PlayingState

connection = pika.BlockingConnection(pika.ConnectionParameters("localhost"))

def on_pause(state: PlayingState) -> AckType:
    print("paused" if state.is_paused else "resumed")
    return AckType.ACK

channel = subscribe_json(
    connection,
    EXCHANGE_PERIL_DIRECT,
    "pause.alice",
    PAUSE_KEY,
    SimpleQueueType.TRANSIENT,
    on_pause,
    PlayingState.from_dict,
)
channel.start_consuming()
```

## Game logs

`peril.logs.write_log(gamelog, path="game.log", delay=1.0)` waits for `delay`
seconds, then appends one line to the file. The line has the form
`<RFC 3339 time> <username>: <message>`. If the file cannot be opened or
written, it raises `GameError`. `format_log_line(gamelog)` returns that line
without writing it.

## What this package does not do

This package is a library only:

* It installs no commands.
* It has no interactive client or server program that reads commands and
  ties them to the broker.
* It does not declare the exchanges (`peril_direct`, `peril_topic`,
  `peril_dlx`) on the broker. You must create them yourself.