"""Canonical schema definitions for each entity kind."""

from typing import Union

from .models import (
    CanonicalField,
    EntityKind,
    EntitySchema,
    ENTITY_PRIORITY,
    UnknownEntityKindError,
)

CLIENT_SCHEMA = EntitySchema(
    kind=EntityKind.CLIENT,
    fields=(
        CanonicalField(
            name="ClientID",
            data_type="string",
            description="Unique identifier for the client",
            aliases=("client_id", "id", "clientid", "client_identifier", "customer_id"),
            examples=("C001", "CLIENT_001", "client-1"),
        ),
        CanonicalField(
            name="ClientName",
            data_type="string",
            description="Name of the client or customer",
            aliases=("client_name", "name", "clientname", "customer_name", "client_title"),
            examples=("John Doe", "Acme Corp", "Client Name"),
        ),
        CanonicalField(
            name="PriorityLevel",
            data_type="number",
            description="Priority level from 1 to 5",
            aliases=("priority_level", "priority", "prioritylevel", "importance", "urgency"),
            examples=("1", "3", "5"),
        ),
        CanonicalField(
            name="RequestedTaskIDs",
            data_type="array",
            description="Comma-separated list of requested task IDs",
            aliases=("requested_task_ids", "task_ids", "tasks", "requested_tasks", "task_list"),
            examples=("T001,T002", "TASK_1,TASK_2"),
        ),
        CanonicalField(
            name="GroupTag",
            data_type="string",
            description="Group or category tag for the client",
            aliases=("group_tag", "group", "grouptag", "client_group", "category"),
            examples=("VIP", "Standard", "Premium"),
        ),
        CanonicalField(
            name="AttributesJSON",
            data_type="json",
            description="Additional attributes in JSON format",
            aliases=("attributes_json", "attributes", "metadata", "extra_data", "properties"),
            examples=('{"vip": true}', '{"region": "US"}'),
        ),
    ),
)

WORKER_SCHEMA = EntitySchema(
    kind=EntityKind.WORKER,
    fields=(
        CanonicalField(
            name="WorkerID",
            data_type="string",
            description="Unique identifier for the worker",
            aliases=("worker_id", "id", "workerid", "employee_id", "staff_id"),
            examples=("W001", "WORKER_001", "emp-123"),
        ),
        CanonicalField(
            name="WorkerName",
            data_type="string",
            description="Name of the worker",
            aliases=("worker_name", "name", "workername", "employee_name", "staff_name"),
            examples=("Alice Johnson", "Bob Smith"),
        ),
        CanonicalField(
            name="Skills",
            data_type="array",
            description="Comma-separated list of skills",
            aliases=("skills", "skill_set", "capabilities", "competencies", "expertise"),
            examples=("Python,JavaScript", "Design,Marketing"),
        ),
        CanonicalField(
            name="AvailableSlots",
            data_type="array",
            description="Available time slots or phases",
            aliases=("available_slots", "slots", "availability", "free_slots", "open_slots"),
            examples=("[1,3,5]", "1,2,3"),
        ),
        CanonicalField(
            name="MaxLoadPerPhase",
            data_type="number",
            description="Maximum workload per phase",
            aliases=("max_load_per_phase", "max_load", "capacity", "workload_limit", "max_tasks"),
            examples=("3", "5", "10"),
        ),
        CanonicalField(
            name="WorkerGroup",
            data_type="string",
            description="Group or team the worker belongs to",
            aliases=("worker_group", "group", "team", "department", "division"),
            examples=("Development", "Design", "Marketing"),
        ),
        CanonicalField(
            name="QualificationLevel",
            data_type="number",
            description="Qualification or experience level",
            aliases=("qualification_level", "level", "experience", "seniority", "grade"),
            examples=("1", "3", "5"),
        ),
    ),
)

TASK_SCHEMA = EntitySchema(
    kind=EntityKind.TASK,
    fields=(
        CanonicalField(
            name="TaskID",
            data_type="string",
            description="Unique identifier for the task",
            aliases=("task_id", "id", "taskid", "task_identifier", "job_id"),
            examples=("T001", "TASK_001", "job-123"),
        ),
        CanonicalField(
            name="TaskName",
            data_type="string",
            description="Name or title of the task",
            aliases=("task_name", "name", "taskname", "job_name", "title"),
            examples=("Website Development", "Data Analysis"),
        ),
        CanonicalField(
            name="Category",
            data_type="string",
            description="Category or type of the task",
            aliases=("category", "type", "task_type", "classification", "genre"),
            examples=("Development", "Design", "Analysis"),
        ),
        CanonicalField(
            name="Duration",
            data_type="number",
            description="Duration in phases or time units",
            aliases=("duration", "time", "length", "phases", "timeline"),
            examples=("2", "5", "10"),
        ),
        CanonicalField(
            name="RequiredSkills",
            data_type="array",
            description="Required skills for the task",
            aliases=("required_skills", "skills", "prerequisites", "requirements", "needed_skills"),
            examples=("Python,SQL", "Design,Photoshop"),
        ),
        CanonicalField(
            name="PreferredPhases",
            data_type="array",
            description="Preferred phases for execution",
            aliases=("preferred_phases", "phases", "timeline", "schedule", "preferred_time"),
            examples=("[1,2,3]", "1-3", "2,4,6"),
        ),
        CanonicalField(
            name="MaxConcurrent",
            data_type="number",
            description="Maximum concurrent assignments",
            aliases=("max_concurrent", "concurrent", "parallel", "simultaneous", "max_parallel"),
            examples=("1", "3", "5"),
        ),
    ),
)

_SCHEMAS: dict[EntityKind, EntitySchema] = {
    EntityKind.CLIENT: CLIENT_SCHEMA,
    EntityKind.WORKER: WORKER_SCHEMA,
    EntityKind.TASK: TASK_SCHEMA,
}


def get_schema(kind: Union[EntityKind, str]) -> EntitySchema:
    """
    Look up the schema for an entity kind.

    Args:
        kind: An EntityKind or its string value ("client", "worker", "task")

    Returns:
        The EntitySchema for that kind

    Raises:
        UnknownEntityKindError: If no such kind exists
    """
    try:
        entity_kind = EntityKind(kind)
    except ValueError:
        raise UnknownEntityKindError(f"Unknown entity kind: {kind}") from None
    return _SCHEMAS[entity_kind]


def all_schemas() -> list[EntitySchema]:
    """All schemas in classifier priority order."""
    return [_SCHEMAS[kind] for kind in ENTITY_PRIORITY]
