from .base import Base, metadata
from .pool import PoolEvent, PropQuestion, PoolSubmission

__all__ = ["Base", "metadata", "PoolEvent", "PropQuestion", "PoolSubmission"]
