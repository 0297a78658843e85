from pathlib import Path

# This file lives at <repo>/src/athlete_goals/core/paths.py
# Repo root is 3 levels up (paths.py -> core -> athlete_goals -> src -> <repo>)
PROJECT_ROOT = Path(__file__).resolve().parents[3]

DATA_DIR = PROJECT_ROOT / "data"
GOALS_DIR = DATA_DIR / "goals"
EXPORTS_DIR = DATA_DIR / "exports"
LOGS_DIR = PROJECT_ROOT / "logs"

DEFAULT_CATALOG_PATH = GOALS_DIR / "goal_catalog.json"


def ensure_dirs() -> None:
    """Create all required project directories if they don't exist."""
    for p in [
        DATA_DIR,
        GOALS_DIR,
        EXPORTS_DIR,
        LOGS_DIR,
    ]:
        p.mkdir(parents=True, exist_ok=True)


def export_csv(filename: str) -> Path:
    """Where to save an export of evaluated assessment rows."""
    return EXPORTS_DIR / filename


if __name__ == "__main__":
    ensure_dirs()
    print("Directories ready at:", DATA_DIR)
