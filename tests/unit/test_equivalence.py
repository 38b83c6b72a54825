"""Tests for desired/observed comparison."""

from __future__ import annotations

from vault_config_operator.utils.equivalence import changed_keys, is_equivalent


class TestIsEquivalent:
    """Test cases for is_equivalent."""

    def test_absent_observed_is_never_equivalent(self):
        """Test a missing Vault object always needs a write."""
        assert is_equivalent({}, None) is False
        assert is_equivalent({"a": 1}, None) is False

    def test_equal_maps(self):
        """Test identical maps are equivalent."""
        assert is_equivalent({"a": 1, "b": ["x"]}, {"a": 1, "b": ["x"]})

    def test_different_value(self):
        """Test a changed value is detected."""
        assert not is_equivalent({"a": 1}, {"a": 2})

    def test_extra_observed_key_is_a_difference(self):
        """Test keys Vault reports but the spec lacks count without compared_keys."""
        assert not is_equivalent({"a": 1}, {"a": 1, "b": 2})

    def test_redacted_keys_ignored_on_both_sides(self):
        """Test secrets Vault never returns do not cause drift."""
        desired = {"username": "root", "password": "s3cret"}
        observed = {"username": "root"}

        assert is_equivalent(desired, observed, redacted_keys=("password",))

    def test_compared_keys_restrict_comparison(self):
        """Test only allow-listed keys are compared."""
        desired = {"max_lease_ttl": 3600}
        observed = {"max_lease_ttl": 3600, "default_lease_ttl": 60, "options": None}

        assert is_equivalent(desired, observed, compared_keys=desired.keys())

    def test_absent_and_empty_differ(self):
        """Test a missing key is not the same as an empty value."""
        assert not is_equivalent({"allowed_roles": []}, {})
        assert not is_equivalent({"description": ""}, {"description": None})


class TestChangedKeys:
    """Test cases for changed_keys."""

    def test_lists_differences(self):
        """Test added, removed and changed keys are reported sorted."""
        desired = {"a": 1, "b": 2, "password": "x"}
        observed = {"a": 1, "b": 3, "c": 4}

        assert changed_keys(desired, observed, redacted_keys=("password",)) == ["b", "c"]

    def test_absent_observed(self):
        """Test every desired key differs from a missing object."""
        assert changed_keys({"a": 1, "b": 2}, None) == ["a", "b"]
