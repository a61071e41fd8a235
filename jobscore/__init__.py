"""jobscore-backend: heuristic fraud check for job postings."""

__version__ = "0.1.0"
