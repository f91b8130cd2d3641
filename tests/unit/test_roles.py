"""
Unit tests for role normalization.
"""

import pytest
from gate_ldap.domain.roles import RoleNormalizer, normalize_roles


class _Authority:
    def __init__(self, authority):
        self.authority = authority


def test_prefix_stripped_case_insensitively():
    """ROLE_ prefix is removed regardless of case and the rest lower-cased."""
    assert normalize_roles({"ROLE_Admin", "role_user", "guest"}) == {"admin", "user", "guest"}


@pytest.mark.parametrize("raw", [{"ROLE_"}, {"ROLE_  "}, {"role_ ROLE_"}])
def test_empty_remainder_dropped(raw):
    """A bare prefix normalizes to nothing and is dropped."""
    assert normalize_roles(raw) == frozenset()


def test_whitespace_after_prefix_trimmed():
    assert normalize_roles({"ROLE_ ops", "ROLE_ ROLE_Dev "}) == {"ops", "dev"}


def test_blank_and_none_tokens_dropped():
    assert normalize_roles(["", "   ", None, "ops"]) == {"ops"}


def test_duplicates_collapse():
    assert normalize_roles(["ROLE_OPS", "ops", "Ops", "role_ops"]) == {"ops"}


@pytest.mark.parametrize("raw", [
    {"ROLE_Admin", "role_user", "guest"},
    {"ROLE_ROLE_nested", "x"},
    {"ROLE_", "Mixed_Case"},
    {"ROLE_ ops", "ROLE_  "},
    {" role_ role_x ", "\tROLE_\tY"},
    set(),
])
def test_idempotent(raw):
    """Normalizing an already-normalized set returns the same set."""
    once = normalize_roles(raw)
    assert normalize_roles(once) == once


def test_authority_objects_accepted():
    assert normalize_roles([_Authority("ROLE_DEV"), _Authority(None)]) == {"dev"}


def test_custom_prefix():
    normalizer = RoleNormalizer(prefix="GRP_")
    assert normalizer.normalize(["grp_Readers", "ROLE_x"]) == {"readers", "role_x"}


def test_empty_input():
    assert normalize_roles([]) == frozenset()
    assert normalize_roles(None) == frozenset()
