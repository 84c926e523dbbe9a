"""
Tag Use Cases
"""

from typing import Any, Dict, List

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    ListEntitiesUseCase,
    UpdateEntityUseCase,
)
from liturgi.domain.entities import Tag, TagCategory, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Result, Return

DUPLICATE_TAG = "A tag with this name already exists"
DUPLICATE_CATEGORY = "A tag category with this name already exists"
TAG_REFERENCES = {"category_id": ("tag_categories", "Tag category")}


class CreateTagUseCase(CreateEntityUseCase):
    model = Tag
    repository = "tags"
    entity_name = "tag"
    references = TAG_REFERENCES
    conflict_message = DUPLICATE_TAG


class UpdateTagUseCase(UpdateEntityUseCase):
    model = Tag
    repository = "tags"
    entity_name = "tag"
    references = TAG_REFERENCES
    conflict_message = DUPLICATE_TAG


class DeleteTagUseCase(DeleteEntityUseCase):
    """Removes the tag from every person it was assigned to"""

    model = Tag
    repository = "tags"
    entity_name = "tag"

    async def before_delete(self, scope: TenantScope, entity: Tag) -> None:
        await scope.person_tags.delete_where(tag_id=entity.id)


class ListTagsUseCase(ListEntitiesUseCase):
    """Filter: category_id"""

    model = Tag
    repository = "tags"
    entity_name = "tag"
    order_by = "name"


class CreateTagCategoryUseCase(CreateEntityUseCase):
    model = TagCategory
    repository = "tag_categories"
    entity_name = "tag_category"
    conflict_message = DUPLICATE_CATEGORY


class UpdateTagCategoryUseCase(UpdateEntityUseCase):
    model = TagCategory
    repository = "tag_categories"
    entity_name = "tag_category"
    conflict_message = DUPLICATE_CATEGORY


class DeleteTagCategoryUseCase(DeleteEntityUseCase):
    """Tags of the category are kept, uncategorized"""

    model = TagCategory
    repository = "tag_categories"
    entity_name = "tag_category"

    async def before_delete(self, scope: TenantScope, entity: TagCategory) -> None:
        await scope.tags.update_where({"category_id": None}, category_id=entity.id)


class ListTagCategoriesUseCase:
    """Categories ordered by name, each with the number of tags in it"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User) -> Result[List[Dict[str, Any]]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            categories = []
            for category in await scope.tag_categories.list(order_by="name"):
                row = category.model_dump(mode="json")
                row["tag_count"] = await scope.tags.count(category_id=category.id)
                categories.append(row)
            return Return.ok(categories)


__all__ = [
    "CreateTagUseCase",
    "UpdateTagUseCase",
    "DeleteTagUseCase",
    "ListTagsUseCase",
    "CreateTagCategoryUseCase",
    "UpdateTagCategoryUseCase",
    "DeleteTagCategoryUseCase",
    "ListTagCategoriesUseCase",
]
