"""
Attendance Use Cases
"""

from liturgi.app.use_cases.common import CreateEntityUseCase, ListEntitiesUseCase
from liturgi.domain.entities import AttendanceRecord


class RecordAttendanceUseCase(CreateEntityUseCase):
    """Person, plan and group must all belong to the caller's organization"""

    model = AttendanceRecord
    repository = "attendance"
    entity_name = "attendance_record"
    references = {
        "person_id": ("people", "Person"),
        "service_plan_id": ("service_plans", "Service plan"),
        "group_id": ("groups", "Group"),
    }


class ListAttendanceUseCase(ListEntitiesUseCase):
    """Filters: person_id, service_plan_id, group_id"""

    model = AttendanceRecord
    repository = "attendance"
    entity_name = "attendance_record"
    order_by = "-attendance_date"


__all__ = ["RecordAttendanceUseCase", "ListAttendanceUseCase"]
