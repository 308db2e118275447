"""Domain layer (pure logic).

- Keep cards, players, the game aggregate and the rules of play here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI, no Redis.
- Prefer deterministic functions (time/random passed in as arguments).
"""
