"""
Unit tests for authorization policies.
"""
import pytest

from registrations.services.authorization import StaticAdminPolicy, require_admin
from registrations.services.errors import Forbidden


class TestStaticAdminPolicy:
    """Tests for StaticAdminPolicy."""

    def test_matching_id(self):
        assert StaticAdminPolicy('1000').is_authorized('1000') is True

    def test_numeric_and_string_ids_match(self):
        assert StaticAdminPolicy(1000).is_authorized('1000') is True
        assert StaticAdminPolicy('1000').is_authorized(1000) is True

    def test_other_id(self):
        assert StaticAdminPolicy('1000').is_authorized('1001') is False

    @pytest.mark.parametrize('caller', ['', None, '1000'])
    def test_unset_admin_authorizes_nobody(self, caller):
        assert StaticAdminPolicy('').is_authorized(caller) is False


class TestRequireAdmin:
    """Tests for require_admin."""

    def test_passes_for_admin(self):
        require_admin(StaticAdminPolicy('1000'), '1000')

    def test_raises_for_non_admin(self):
        with pytest.raises(Forbidden):
            require_admin(StaticAdminPolicy('1000'), '42')

    def test_custom_policy(self):
        class AllowList:
            def __init__(self, ids):
                self.ids = set(ids)

            def is_authorized(self, caller_id):
                return caller_id in self.ids

        require_admin(AllowList(['a', 'b']), 'b')
        with pytest.raises(Forbidden):
            require_admin(AllowList(['a', 'b']), 'c')
