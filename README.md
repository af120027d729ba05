# asciiarcade

Two-player board games in the terminal. Two people connect to the same
server, type the same room code, and play tic-tac-toe or checkers against
each other over a WebSocket connection.

## Installing

```
pip install .
```

For running the tests as well:

```
pip install ".[test]"
pytest
```

## Running a server

```
asciiarcade-server [--host HOST] [--port PORT]
```

By default the server listens on all interfaces, port 8000. Every room code
names one room: the first player to join a code creates the room, the second
fills it, and any further player is told the room is full and disconnected.
The room closes when the game ends or a player leaves.

## Playing

```
asciiarcade [--url URL]
```

The client connects to `--url` if given, otherwise to the `SERVER_URL`
environment variable, otherwise to `ws://localhost:8000`. It also reads a
`.env` file in the current directory, so a line such as

```
SERVER_URL=ws://localhost:8000
```

is enough to choose a server. Setting `DEBUG` to any non-empty value writes a
log to `debug.log`. The client needs an interactive terminal and refuses to
start without one.

### Flow of a session

1. **Menu** – type a room code (up to five characters, Backspace deletes)
   and press Enter.
2. **Waiting room** – wait for a second player; `q` leaves.
3. **Game selection** – player 1 picks a game with the arrow keys (or
   `w`/`s`, `k`/`j`) and confirms with Enter or Space. Player 2 waits.
   Either player can leave with `q`.
4. **In game** – play until someone wins, the board is full, or a player
   concedes with `q` or `c`.
5. **End of game** – `y` joins the same room code again, `n` or `q` leaves.

If the other player leaves, the room closes and you are returned to the
menu. Ctrl+C quits at any time.

### Tic-tac-toe

Move the cursor with the arrow keys, `wasd` or `hjkl`, and press Enter or
Space to place your mark. Player 1 plays X and moves first; player 2 plays O.

### Checkers

Player 1 plays white from the bottom, player 2 plays black; each player sees
the board from their own side, and the cursor keys follow that view. Move
the cursor onto one of your pieces and press Enter or Space to pick it up,
then choose a direction:

| Key | Move                    |
|-----|-------------------------|
| `e` | forward left            |
| `r` | forward right           |
| `d` | back left (kings only)  |
| `f` | back right (kings only) |

Backspace or Escape puts the piece down again. Moving onto an opponent's
piece with an empty square behind it captures it. A piece reaching the far
row becomes a king. The player who loses all pieces loses the game.

## Using the library

The game rules can be used without the network parts:

- `asciiarcade.tic_tac_toe` – `TicTacToeGame` and `TicTacToeTurn`
- `asciiarcade.checkers` – `CheckersGame`, `CheckersTurn`, `CheckersDirection`
- `asciiarcade.catalog` – `get_game_types()`, `new_game(game_type)`,
  `game_from_dict(data)` and `turn_from_dict(data)`
- `asciiarcade.messages` – the JSON messages exchanged between client and
  server (`ClientMessage`, `ServerMessage`, with `to_json()` and
  `from_json()`)

A game's `validate_move(turn, player_num)` raises `InvalidMoveError` (from
`asciiarcade.game`) with a readable reason when a move is not allowed, and
`execute_turn(turn, player_num)` applies a validated move and updates the
game's `status`. `display_board(cursor, player_num)` renders the board as
styled terminal text.

```python
from asciiarcade.catalog import new_game
from asciiarcade.game import GameType
from asciiarcade.tic_tac_toe import TicTacToeTurn
from asciiarcade.vector import Vector

game = new_game(GameType.TIC_TAC_TOE)
turn = TicTacToeTurn(Vector(1, 1))
game.validate_move(turn, 1)
game.execute_turn(turn, 1)
print(game.status)
```

The server side is in `asciiarcade.hub` (`Hub`), `asciiarcade.room`
(`Room`) and `asciiarcade.player` (`Player`); `asciiarcade.server.run_server`
starts it from asyncio code.

## What it does not do

- There is no single-player mode or computer opponent; every game needs two
  connected players.
- Checkers captures are single jumps: there are no multi-jump chains and
  capturing is never forced.
- The terminal client relies on POSIX terminal control and does not run on
  Windows consoles.
- Nothing is stored: rooms and games live only in the server's memory.