"""
Interface package: terminal front end for the chess game.

Modules:
    cli — Line-oriented game loop. Reads moves and commands from stdin,
          writes the game to stdout. Can be run as: python -m interface.cli
"""
