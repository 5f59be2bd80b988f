from .eval import AIInvariantError, ArenaConfig, arena, play_game

__all__ = ["AIInvariantError", "ArenaConfig", "arena", "play_game"]
