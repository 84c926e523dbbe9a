"""
Song Entity
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow


class Song(SQLModel, table=True):
    """Song entity - an entry in the organization's song library."""

    __tablename__ = "songs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    title: str = Field(max_length=200)
    artist: Optional[str] = Field(default=None, max_length=200)
    default_key: Optional[str] = Field(default=None, max_length=10)
    bpm: Optional[int] = Field(default=None)
    ccli_number: Optional[str] = Field(default=None, max_length=50)
    lyrics: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_song_org_title", "org_id", "title"),)


class Arrangement(SQLModel, table=True):
    """
    Arrangement entity - a named version of a song in a given key.

    Business Rules:
    - Belongs to one song and is deleted with it
    """

    __tablename__ = "arrangements"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    song_id: UUID = Field(foreign_key="songs.id", nullable=False, index=True)

    name: str = Field(max_length=200)
    key: str = Field(max_length=10)
    bpm: Optional[int] = Field(default=None)
    chord_chart: Optional[str] = Field(default=None)
    lyrics: Optional[str] = Field(default=None)
    audio_url: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
