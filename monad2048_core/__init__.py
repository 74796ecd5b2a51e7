"""
Monad 2048 core Python package.

Pure game logic for the 4x4 tile-merging puzzle, kept free of UI and ledger
networking so it can be tested on its own.
Modules:
- board.py: Board, Tile, SIZE
- direction.py: Direction
- collapse.py: single-line collapse with merge-once semantics
- spawn.py: weighted random tile placement with an injectable random source
- engine.py: whole-board transitions and terminal detection
- session.py: GameSession, the only owner of board and score
- ledger.py: fire-and-forget forwarding of game events to an external ledger
- registry.py: per-session locking store used by the HTTP app
"""
