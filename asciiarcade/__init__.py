"""Two-player tic-tac-toe and checkers in the terminal, with a WebSocket server and client."""

__version__ = "0.1.0"