from __future__ import annotations


from sqlalchemy import Column, DateTime, Integer, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()


class Page(Base):
    __tablename__ = "pages"

    page_id = Column(Integer, primary_key=True)
    page_url = Column(Text, unique=True, nullable=False)
    title = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    keywords = Column(Text, nullable=True)  # space-separated, sorted
    fetched_at = Column(DateTime(timezone=True), nullable=True)
