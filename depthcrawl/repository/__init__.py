from .pages import PagesRepository

__all__ = ["PagesRepository"]
