"""
Song Library Use Cases
"""

from typing import List, Optional
from uuid import UUID

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    GetEntityUseCase,
    UpdateEntityUseCase,
    not_found,
)
from liturgi.domain.entities import Arrangement, Song, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Result, Return


class CreateSongUseCase(CreateEntityUseCase):
    model = Song
    repository = "songs"
    entity_name = "song"


class UpdateSongUseCase(UpdateEntityUseCase):
    model = Song
    repository = "songs"
    entity_name = "song"


class DeleteSongUseCase(DeleteEntityUseCase):
    """Arrangements go with the song; service items keep their title but lose the link"""

    model = Song
    repository = "songs"
    entity_name = "song"

    async def before_delete(self, scope: TenantScope, entity: Song) -> None:
        await scope.arrangements.delete_where(song_id=entity.id)
        await scope.service_items.update_where({"song_id": None}, song_id=entity.id)


class GetSongUseCase(GetEntityUseCase):
    model = Song
    repository = "songs"
    entity_name = "song"


class SearchSongsUseCase:
    """Songs whose title or artist contains the query, ordered by title"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, query: Optional[str] = None) -> Result[List[Song]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            songs = await scope.songs.search(query)
            return Return.ok(songs)


class CreateArrangementUseCase(CreateEntityUseCase):
    model = Arrangement
    repository = "arrangements"
    entity_name = "arrangement"
    references = {"song_id": ("songs", "Song")}


class UpdateArrangementUseCase(UpdateEntityUseCase):
    model = Arrangement
    repository = "arrangements"
    entity_name = "arrangement"


class DeleteArrangementUseCase(DeleteEntityUseCase):
    model = Arrangement
    repository = "arrangements"
    entity_name = "arrangement"


class ListArrangementsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, song_id: UUID) -> Result[List[Arrangement]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            if await scope.songs.get(song_id) is None:
                return Return.err(not_found("Song"))
            arrangements = await scope.arrangements.list(order_by="name", song_id=song_id)
            return Return.ok(arrangements)


__all__ = [
    "CreateSongUseCase",
    "UpdateSongUseCase",
    "DeleteSongUseCase",
    "GetSongUseCase",
    "SearchSongsUseCase",
    "CreateArrangementUseCase",
    "UpdateArrangementUseCase",
    "DeleteArrangementUseCase",
    "ListArrangementsUseCase",
]
