from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from liturgi.domain.entities import Form


class IFormRepository(ABC):
    """
    Form lookup by id across organizations - application layer

    Only used to resolve the organization of a form receiving an anonymous
    submission. All management of forms goes through the tenant scope.
    """

    @abstractmethod
    async def get_by_id(self, form_id: UUID) -> Optional[Form]:
        pass
