from .engine import make_engine, init_schema
from .models import Base, Page

__all__ = [
    "make_engine",
    "init_schema",
    "Base",
    "Page",
]
