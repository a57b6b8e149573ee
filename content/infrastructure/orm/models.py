from sqlalchemy import Column, Integer, String, Text, Index

from config.database.session import Base


class VideoORM(Base):
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    published_at = Column(String(40), nullable=False)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    thumbnail_url = Column(String(500), nullable=False)
    video_id = Column(String(100), nullable=False, unique=True)
    owner_channel_title = Column(String(255), nullable=False)


class VisitorORM(Base):
    __tablename__ = "visitors"
    __table_args__ = (Index("ix_visitors_visitor_id_visited_at", "visitor_id", "visited_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    visitor_id = Column(String(64), nullable=False)
    # ISO-8601 UTC, fixed width (YYYY-MM-DDTHH:MM:SSZ)
    visited_at = Column(String(20), nullable=False)
