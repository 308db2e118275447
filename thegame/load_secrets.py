import os
from dotenv import load_dotenv

load_dotenv()

database_url = os.getenv("GAMES_DATABASE_URL", "sqlite+aiosqlite:///./games.sqlite3")
redis_host = os.getenv("REDIS_HOST", "redis")
redis_port = int(os.getenv("REDIS_PORT", "6379"))
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
game_ttl_hours = int(os.getenv("GAME_TTL_HOURS", "24"))
expired_game_sweep_hours = int(os.getenv("EXPIRED_GAME_SWEEP_HOURS", "1"))

if __name__ == "__main__":
    print(database_url, redis_host, redis_port, log_level, game_ttl_hours)
