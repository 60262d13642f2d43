"""Tests for field-expansion projection."""

import pytest

from congregation.records.decoder import decode_member, decode_seeker
from congregation.records.errors import EnumDecodeError
from congregation.records.expand import (
    MemberExpand,
    expansion_param,
    expansion_set,
    present_groups,
    project,
)

ALL_GROUPS = set(MemberExpand)


class TestExpansionSet:
    """Tests for request normalization."""

    def test_none(self):
        """None means no projection."""
        assert expansion_set(None) is None

    def test_wire_names(self):
        """Wire names and members are both accepted."""
        groups = expansion_set(["contactInformation", MemberExpand.EMPLOYMENT_INFORMATION])
        assert groups == {MemberExpand.CONTACT_INFORMATION, MemberExpand.EMPLOYMENT_INFORMATION}

    def test_single_value(self):
        """A single name is wrapped."""
        assert expansion_set("martialInformation") == {MemberExpand.MARTIAL_INFORMATION}

    def test_unknown_group(self):
        """Unknown group names are rejected."""
        with pytest.raises(EnumDecodeError, match="MemberExpand"):
            expansion_set(["photos"])

    def test_param_order(self):
        """The expand parameter lists groups in a fixed order."""
        param = expansion_param(["discipleshipInformation", "contactInformation"])
        assert param == "contactInformation,discipleshipInformation"

    def test_param_empty(self):
        """No groups, no parameter."""
        assert expansion_param([]) is None
        assert expansion_param(None) is None


class TestProject:
    """Tests for project()."""

    def test_contact_only(self, member_payload):
        """Requesting contact keeps contact and clears employment."""
        member = decode_member(member_payload)
        projected = project(member, {MemberExpand.CONTACT_INFORMATION})
        assert projected.employment_information is None
        assert projected.marital_information is None
        assert projected.discipleship_information is None
        assert projected.contact_information == member.contact_information

    def test_core_untouched(self, member_payload):
        """Core fields survive any projection."""
        member = decode_member(member_payload)
        projected = project(member, [])
        assert projected.member_id == member.member_id
        assert projected.phone == member.phone
        assert present_groups(projected) == set()

    def test_input_not_mutated(self, member_payload):
        """The original entity is unchanged."""
        member = decode_member(member_payload)
        project(member, [])
        assert present_groups(member) == ALL_GROUPS

    def test_none_keeps_everything(self, member_payload):
        """No request returns the entity itself."""
        member = decode_member(member_payload)
        assert project(member, None) is member

    def test_composes_by_intersection(self, member_payload):
        """Projecting to B then A equals projecting to A, for A within B."""
        member = decode_member(member_payload)
        outer = {MemberExpand.CONTACT_INFORMATION, MemberExpand.MARTIAL_INFORMATION}
        inner = {MemberExpand.MARTIAL_INFORMATION}
        assert project(project(member, outer), inner) == project(member, inner)

    def test_requesting_absent_group(self):
        """Requesting a group the entity lacks leaves it absent."""
        member = decode_member({"memberId": "TKT1", "spouseName": "Jane"})
        projected = project(member, ["contactInformation", "martialInformation"])
        assert projected.contact_information is None
        assert projected.marital_information.spouse_name == "Jane"

    def test_member_group_accessor(self, member_payload):
        """Groups are reachable by wire name."""
        member = decode_member(member_payload)
        assert member.group("employmentInformation") is member.employment_information

    def test_seeker_has_no_groups(self, seeker_payload):
        """Seekers project to an equal copy."""
        seeker = decode_seeker(seeker_payload)
        assert project(seeker, ["contactInformation"]) == seeker
