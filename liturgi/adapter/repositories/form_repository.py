from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from liturgi.app.repositories.form_repository import IFormRepository
from liturgi.domain.entities import Form


class FormRepository(IFormRepository):
    """Form repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, form_id: UUID) -> Optional[Form]:
        stmt = select(Form).where(Form.id == form_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()
