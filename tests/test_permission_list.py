"""Tests for converting permission editor payloads into stored grant lists."""

import pytest

from volunteer_access import AccessControl, CatalogError, InvalidPermissionError, PermissionAssignmentError
from volunteer_access.services.permission_list import SELF_SUFFIX, is_restricted, to_permission_list

ALL_OPERATIONS = {"create": True, "read": True, "update": True, "delete": True}


@pytest.fixture()
def editor() -> AccessControl:
    """A user allowed to edit permissions, without root."""
    return AccessControl(grants="organisation.permissions")


@pytest.fixture()
def root_editor() -> AccessControl:
    return AccessControl(grants="root,organisation.permissions")


@pytest.fixture()
def blank() -> AccessControl:
    """The edited account before the change, holding nothing."""
    return AccessControl()


class TestCollection:

    def test_boolean_leaves(self, editor, blank):
        data = {"event": {"applications": True, "visible": False, "requests": True}}
        assert to_permission_list(data, editor, blank) == "event.applications,event.requests"

    def test_partial_crud(self, editor, blank):
        data = {"organisation": {"accounts": {"read": True, "update": True, "delete": False}}}
        assert to_permission_list(data, editor, blank) == (
            "organisation.accounts:read,organisation.accounts:update"
        )

    def test_complete_crud_collapses(self, editor, blank):
        data = {"system": {"logs": dict(ALL_OPERATIONS)}}
        assert to_permission_list(data, editor, blank) == "system.logs"

    def test_self_suffix_addresses_subtree_root(self, editor, blank):
        data = {
            f"statistics{SELF_SUFFIX}": True,
            "statistics": {"basic": True},
        }
        assert to_permission_list(data, editor, blank) == "statistics,statistics.basic"

    def test_nothing_granted(self, editor, blank):
        assert to_permission_list({"event": {"visible": False}}, editor, blank) is None
        assert to_permission_list({}, editor, blank) is None

    def test_non_boolean_leaves_ignored(self, editor, blank):
        data = {"event": {"applications": "yes", "visible": None, "requests": True}}
        assert to_permission_list(data, editor, blank) == "event.requests"

    def test_non_mapping_input(self, editor, blank):
        with pytest.raises(TypeError):
            to_permission_list("event.visible", editor, blank)
        with pytest.raises(TypeError):
            to_permission_list(None, editor, blank)

    def test_invalid_key(self, editor, blank):
        with pytest.raises(InvalidPermissionError):
            to_permission_list({"event": {"visible!": True}}, editor, blank)

    def test_result_is_accepted_as_grants(self, editor, blank):
        data = {"organisation": {"accounts": {"read": True}}, "statistics": {"basic": True}}
        access = AccessControl(grants=to_permission_list(data, editor, blank))
        assert access.can("organisation.accounts", "read")
        assert not access.can("organisation.accounts", "update")
        assert access.can("statistics.basic")


class TestRestrictions:

    def test_restricted_permission_requires_root(self, editor, blank):
        with pytest.raises(PermissionAssignmentError) as exc_info:
            to_permission_list({"system": {"settings": True}}, editor, blank)
        assert exc_info.value.permission == "system.settings"
        assert str(exc_info.value) == 'You are not able to assign the "system.settings" permission'
        assert exc_info.value.status_code == 403

    def test_root_may_assign(self, root_editor, blank):
        assert to_permission_list({"system": {"settings": True}}, root_editor, blank) == "system.settings"

    def test_existing_permission_may_be_kept(self, editor):
        existing = AccessControl(grants="system.settings")
        assert to_permission_list({"system": {"settings": True}}, editor, existing) == "system.settings"

    def test_inherited_existing_permission_may_be_kept(self, editor):
        existing = AccessControl(grants="system")
        assert to_permission_list({"system": {"settings": True}}, editor, existing) == "system.settings"

    def test_restriction_reached_through_parent(self, editor, blank):
        with pytest.raises(PermissionAssignmentError) as exc_info:
            to_permission_list({f"system{SELF_SUFFIX}": True}, editor, blank)
        assert exc_info.value.permission == "system"

    def test_operation_restriction(self, editor, blank):
        data = {"organisation": {"accounts": dict(ALL_OPERATIONS)}}
        with pytest.raises(PermissionAssignmentError) as exc_info:
            to_permission_list(data, editor, blank)
        assert exc_info.value.permission == "organisation.accounts:delete"

    def test_unrestricted_operations_pass(self, editor, blank):
        data = {"organisation": {"accounts": {"create": True, "read": True, "update": True}}}
        assert to_permission_list(data, editor, blank) == (
            "organisation.accounts:create,organisation.accounts:read,organisation.accounts:update"
        )

    def test_existing_operation_may_be_kept(self, editor):
        existing = AccessControl(grants="organisation.accounts:delete")
        data = {"organisation": {"accounts": {"delete": True}}}
        assert to_permission_list(data, editor, existing) == "organisation.accounts:delete"

    def test_root_itself_is_restricted(self, editor, blank):
        with pytest.raises(PermissionAssignmentError):
            to_permission_list({"root": True}, editor, blank)

    def test_custom_catalog(self, small_catalog, blank):
        user = AccessControl(catalog=small_catalog)
        with pytest.raises(PermissionAssignmentError):
            to_permission_list({"admin": True}, user, blank, catalog=small_catalog)

        root_user = AccessControl(grants="root", catalog=small_catalog)
        assert to_permission_list({"admin": True}, root_user, blank) == "admin"


class TestIsRestricted:

    def test_root_restriction(self, editor, root_editor):
        assert is_restricted("root", editor) is True
        assert is_restricted("root", root_editor) is False

    def test_unknown_restriction(self, editor):
        with pytest.raises(CatalogError):
            is_restricted("owner", editor)
