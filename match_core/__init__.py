"""
Match Grid core Python package.

Pure game logic for the card-matching puzzle, free of any I/O so hosts
(the Flask service in app.py, the terminal client in cli.py) only call
engine operations and render snapshots.
Modules:
- card.py: Card, Position
- position_index.py: PositionIndex (fixed-bucket hash table)
- graph.py: AdjacencyGraph (components, shortest path)
- history.py / ledger.py: MoveHistory, ScoreLedger
- outcome.py: ErrorKind, Outcome
- deal.py / engine.py: dealing and the GameEngine state machine
- registry.py: GameStore used by hosts to keep live games
"""
