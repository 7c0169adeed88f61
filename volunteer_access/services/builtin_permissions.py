"""Built-in permission declarations for the volunteer manager."""

from __future__ import annotations

from ..models.permission import (
    ROOT_RESTRICTION,
    Operation,
    PermissionDefinition,
    PermissionKind,
)

PERMISSIONS: tuple[PermissionDefinition, ...] = (
    # Event permissions -------------------------------------------------
    PermissionDefinition(
        name="event.applications",
        requires_event=True,
        requires_team=True,
        title="Applications",
        description="Review, approve and reject applications for the team.",
    ),
    PermissionDefinition(
        name="event.requests",
        requires_event=True,
        requires_team=True,
        title="Schedule requests",
        description="Read the availability and scheduling requests of volunteers.",
    ),
    PermissionDefinition(
        name="event.schedules",
        kind=PermissionKind.CRUD,
        requires_event=True,
        requires_team=True,
        title="Schedules",
        description="Manage the shifts and schedule of the team.",
    ),
    PermissionDefinition(
        name="event.settings",
        requires_event=True,
        title="Event settings",
        description="Change the event's dates, location and finance settings.",
    ),
    PermissionDefinition(
        name="event.visible",
        requires_event=True,
        requires_team=True,
        title="Event visibility",
        description="See the event and the team in the administration area.",
    ),
    PermissionDefinition(
        name="event.volunteers.information",
        kind=PermissionKind.CRUD,
        requires_event=True,
        requires_team=True,
        title="Volunteer information",
        description="Access personal information of the team's volunteers.",
    ),
    PermissionDefinition(
        name="event.volunteers.participation",
        requires_event=True,
        requires_team=True,
        title="Volunteer participation",
        description="Cancel, reinstate and move volunteers between teams.",
    ),
    # Organisation permissions ------------------------------------------
    PermissionDefinition(
        name="organisation.accounts",
        kind=PermissionKind.CRUD,
        title="Accounts",
        description="Manage the accounts of everyone in the organisation.",
        restrict={Operation.DELETE: ROOT_RESTRICTION},
    ),
    PermissionDefinition(
        name="organisation.avatars",
        title="Avatars",
        description="Update the avatar of any volunteer.",
    ),
    PermissionDefinition(
        name="organisation.permissions",
        title="Permissions",
        description="Grant and revoke permissions of other accounts.",
        restrict=ROOT_RESTRICTION,
    ),
    # Statistics permissions --------------------------------------------
    PermissionDefinition(
        name="statistics.basic",
        title="Basic statistics",
        description="See participation statistics across events.",
    ),
    PermissionDefinition(
        name="statistics.finances",
        title="Financial statistics",
        description="See ticket and product sales of events.",
    ),
    # System permissions ------------------------------------------------
    PermissionDefinition(
        name="system.ai",
        title="AI settings",
        description="Configure prompts and models used for generated messages.",
    ),
    PermissionDefinition(
        name="system.diagnostics",
        title="Diagnostics",
        description="Inspect error reports and diagnostic information.",
    ),
    PermissionDefinition(
        name="system.logs",
        kind=PermissionKind.CRUD,
        title="Logs",
        description="Read and remove entries of the system log.",
    ),
    PermissionDefinition(
        name="system.settings",
        title="System settings",
        description="Change integrations and other system-wide settings.",
        restrict=ROOT_RESTRICTION,
    ),
    PermissionDefinition(
        name="root",
        title="Root",
        description="Assign restricted permissions to other accounts.",
        restrict=ROOT_RESTRICTION,
    ),
    # Test fixtures -----------------------------------------------------
    PermissionDefinition(
        name="test.boolean",
        title="Boolean test permission",
    ),
    PermissionDefinition(
        name="test.boolean.required.both",
        requires_event=True,
        requires_team=True,
        title="Test permission requiring an event and a team",
    ),
    PermissionDefinition(
        name="test.boolean.required.event",
        requires_event=True,
        title="Test permission requiring an event",
    ),
    PermissionDefinition(
        name="test.boolean.required.team",
        requires_team=True,
        title="Test permission requiring a team",
    ),
    PermissionDefinition(
        name="test.crud",
        kind=PermissionKind.CRUD,
        title="CRUD test permission",
    ),
)

# Group members may name other groups; expansion happens when rules are built.
PERMISSION_GROUPS: dict[str, tuple[str, ...]] = {
    "testgroup": ("test",),
    "staff": (
        "event.applications",
        "event.visible",
        "statistics.basic",
    ),
    "senior": (
        "staff",
        "event.schedules",
        "event.volunteers.information",
        "event.volunteers.participation",
    ),
    "admin": (
        "senior",
        "event",
        "organisation.accounts",
        "organisation.avatars",
        "statistics",
        "system.diagnostics",
        "system.logs:read",
    ),
}

# Granted automatically for the principal's default teams, see rule_normalizer.
VISIBILITY_PERMISSION = "event.visible"
