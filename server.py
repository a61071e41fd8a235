# Local entrypoint: `uvicorn server:app --reload`
from jobscore.index import app

__all__ = ["app"]
