from .codeforces_connector import CodeforcesClient

__all__ = ["CodeforcesClient"]
