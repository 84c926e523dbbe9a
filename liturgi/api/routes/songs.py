from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, dump_all, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.songs import (
    CreateArrangementUseCase,
    CreateSongUseCase,
    DeleteArrangementUseCase,
    DeleteSongUseCase,
    GetSongUseCase,
    ListArrangementsUseCase,
    SearchSongsUseCase,
    UpdateArrangementUseCase,
    UpdateSongUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/songs", tags=["Songs"])


class CreateSongRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    artist: Optional[str] = Field(default=None, max_length=200)
    default_key: Optional[str] = Field(default=None, max_length=10)
    bpm: Optional[int] = Field(default=None, ge=1, le=400)
    ccli_number: Optional[str] = Field(default=None, max_length=50)
    lyrics: Optional[str] = None


class UpdateSongRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    artist: Optional[str] = Field(default=None, max_length=200)
    default_key: Optional[str] = Field(default=None, max_length=10)
    bpm: Optional[int] = Field(default=None, ge=1, le=400)
    ccli_number: Optional[str] = Field(default=None, max_length=50)
    lyrics: Optional[str] = None

    _required = non_nullable("title")


@router.get("")
async def search_songs(
    search: Optional[str] = Query(None, max_length=100),
    actor: User = Depends(require_permission(Permission.services_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Title or artist contains search, case-insensitive"""
    songs = unwrap(await SearchSongsUseCase(uow).execute(actor, search))
    return {"songs": dump_all(songs)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_song(
    request: CreateSongRequest,
    actor: User = Depends(require_permission(Permission.services_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    song = unwrap(await CreateSongUseCase(uow).execute(actor, request.model_dump()))
    return {"song": dump(song)}


@router.get("/{song_id}")
async def get_song(
    song_id: UUID,
    actor: User = Depends(require_permission(Permission.services_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    song = unwrap(await GetSongUseCase(uow).execute(actor, song_id))
    return {"song": dump(song)}


@router.patch("/{song_id}")
async def update_song(
    song_id: UUID,
    request: UpdateSongRequest,
    actor: User = Depends(require_permission(Permission.services_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    song = unwrap(await UpdateSongUseCase(uow).execute(actor, song_id, changes))
    return {"song": dump(song)}


@router.delete("/{song_id}")
async def delete_song(
    song_id: UUID,
    actor: User = Depends(require_permission(Permission.services_delete)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteSongUseCase(uow).execute(actor, song_id))
    return {"success": True}


# ============================================================================
# Arrangements
# ============================================================================


class CreateArrangementRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    key: str = Field(..., min_length=1, max_length=10)
    bpm: Optional[int] = Field(default=None, ge=1, le=400)
    chord_chart: Optional[str] = None
    lyrics: Optional[str] = None
    audio_url: Optional[str] = Field(default=None, max_length=500)


class UpdateArrangementRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    key: Optional[str] = Field(default=None, min_length=1, max_length=10)
    bpm: Optional[int] = Field(default=None, ge=1, le=400)
    chord_chart: Optional[str] = None
    lyrics: Optional[str] = None
    audio_url: Optional[str] = Field(default=None, max_length=500)

    _required = non_nullable("name", "key")


@router.get("/{song_id}/arrangements")
async def list_arrangements(
    song_id: UUID,
    actor: User = Depends(require_permission(Permission.services_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    arrangements = unwrap(await ListArrangementsUseCase(uow).execute(actor, song_id))
    return {"arrangements": dump_all(arrangements)}


@router.post("/{song_id}/arrangements", status_code=status.HTTP_201_CREATED)
async def create_arrangement(
    song_id: UUID,
    request: CreateArrangementRequest,
    actor: User = Depends(require_permission(Permission.services_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 404: NOT_FOUND for an unknown song
    """
    data = {**request.model_dump(), "song_id": song_id}
    arrangement = unwrap(await CreateArrangementUseCase(uow).execute(actor, data))
    return {"arrangement": dump(arrangement)}


@router.patch("/{song_id}/arrangements/{arrangement_id}")
async def update_arrangement(
    song_id: UUID,
    arrangement_id: UUID,
    request: UpdateArrangementRequest,
    actor: User = Depends(require_permission(Permission.services_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    arrangement = unwrap(
        await UpdateArrangementUseCase(uow).execute(
            actor, arrangement_id, changes, song_id=song_id
        )
    )
    return {"arrangement": dump(arrangement)}


@router.delete("/{song_id}/arrangements/{arrangement_id}")
async def delete_arrangement(
    song_id: UUID,
    arrangement_id: UUID,
    actor: User = Depends(require_permission(Permission.services_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteArrangementUseCase(uow).execute(actor, arrangement_id, song_id=song_id))
    return {"success": True}
