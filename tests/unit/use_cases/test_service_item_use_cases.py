"""
Unit tests for service item ordering
"""

from uuid import uuid4

import pytest

from liturgi.app.use_cases.services import DeleteServiceItemUseCase, ReorderServiceItemsUseCase
from liturgi.app.use_cases.services.item_use_cases import move_item
from liturgi.domain.entities import ServiceItem, ServicePlan


def make_items(plan_id, count):
    return [
        ServiceItem(id=uuid4(), service_plan_id=plan_id, title=f"Item {i}", position=i)
        for i in range(count)
    ]


@pytest.mark.parametrize(
    "from_index,new_position,expected",
    [
        (2, 0, [2, 0, 1, 3]),
        (0, 3, [1, 2, 3, 0]),
        (1, 2, [0, 2, 1, 3]),
        (3, 3, [0, 1, 2, 3]),
    ],
)
def test_move_item(from_index, new_position, expected):
    items = make_items(uuid4(), 4)

    ordered = move_item(items, items[from_index].id, new_position)

    assert ordered == [items[i] for i in expected]


@pytest.mark.asyncio
async def test_reorder_rewrites_contiguous_positions(mock_uow, mock_scope, make_user):
    # Arrange
    plan = ServicePlan(id=uuid4(), title="Sunday")
    items = make_items(plan.id, 4)
    mock_scope.service_plans.get.return_value = plan
    mock_scope.service_items.list.return_value = list(items)

    # Act
    result = await ReorderServiceItemsUseCase(mock_uow).execute(
        make_user(), plan.id, items[3].id, 1
    )

    # Assert
    assert result.is_ok()
    assert [item.id for item in result.value] == [
        items[0].id, items[3].id, items[1].id, items[2].id
    ]
    assert [item.position for item in result.value] == [0, 1, 2, 3]
    mock_scope.service_items.list.assert_called_once_with(
        order_by="position", service_plan_id=plan.id
    )
    audit = mock_scope.audit_logs.add.call_args[0][0]
    assert audit.entity == "service_plan"
    assert audit.diff["old"]["item_order"][1] == str(items[1].id)
    assert audit.diff["new"]["item_order"][1] == str(items[3].id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("new_position", [-1, 3])
async def test_reorder_out_of_range_is_validation_error(
    mock_uow, mock_scope, make_user, new_position
):
    plan = ServicePlan(id=uuid4(), title="Sunday")
    items = make_items(plan.id, 3)
    mock_scope.service_plans.get.return_value = plan
    mock_scope.service_items.list.return_value = items

    result = await ReorderServiceItemsUseCase(mock_uow).execute(
        make_user(), plan.id, items[0].id, new_position
    )

    assert result.error.code == "VALIDATION_FAILED"
    assert result.error.message == "Position must be between 0 and 2"
    mock_scope.service_items.update.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_reorder_in_foreign_plan_is_not_found(mock_uow, mock_scope, make_user):
    mock_scope.service_plans.get.return_value = None

    result = await ReorderServiceItemsUseCase(mock_uow).execute(
        make_user(), uuid4(), uuid4(), 0
    )

    assert result.error.code == "NOT_FOUND"
    assert result.error.message == "Service plan not found"


@pytest.mark.asyncio
async def test_reorder_item_of_another_plan_is_not_found(mock_uow, mock_scope, make_user):
    plan = ServicePlan(id=uuid4(), title="Sunday")
    mock_scope.service_plans.get.return_value = plan
    mock_scope.service_items.list.return_value = make_items(plan.id, 2)

    result = await ReorderServiceItemsUseCase(mock_uow).execute(
        make_user(), plan.id, uuid4(), 0
    )

    assert result.error.message == "Service item not found"


@pytest.mark.asyncio
async def test_delete_item_closes_the_gap(mock_uow, mock_scope, make_user):
    """Deleting position 1 of 0..3 leaves 0..2"""
    # Arrange
    plan_id = uuid4()
    items = make_items(plan_id, 4)
    deleted = items[1]
    mock_scope.service_items.get_by.return_value = deleted
    mock_scope.service_items.list.return_value = [items[0], items[2], items[3]]

    # Act
    result = await DeleteServiceItemUseCase(mock_uow).execute(
        make_user(), deleted.id, service_plan_id=plan_id
    )

    # Assert
    assert result.is_ok()
    mock_scope.service_items.get_by.assert_called_once_with(
        id=deleted.id, service_plan_id=plan_id
    )
    assert [items[0].position, items[2].position, items[3].position] == [0, 1, 2]
    assert mock_scope.service_items.update.call_count == 2
