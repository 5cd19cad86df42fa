# -*- coding: utf-8 -*-
"""
Tests for local -> remote reconciliation.
"""
import itertools
from types import SimpleNamespace

from models.area import Area
from models.subarea import Subarea
from models.unit import Unit
from models.member import Member
from models.remote_records import RemoteArea
from services.exceptions import MediaTransferError, ParentNotFoundError, ValidationError


def _remote_state(remote_stores):
    """Remote rows by natural key, without the per-run sync stamp."""
    state = {}
    for name in ("areas", "subareas", "units", "members"):
        for record in getattr(remote_stores, name).list():
            row = record.to_row()
            row.pop("synced_at", None)
            state[(name, row.get("code") or row.get("member_code"))] = row
    return state


class TestUpload:

    def test_uploads_all_tiers(self, session, remote_stores, seeded):
        result = session.run_upload()

        assert result.success
        assert result.uploaded.to_dict() == {"areas": 1, "subareas": 1, "units": 1, "members": 1}
        area = remote_stores.areas.get_by_natural_key("W01")
        subarea = remote_stores.subareas.get_by_natural_key("V01")
        unit = remote_stores.units.get_by_natural_key("H001")
        member = remote_stores.members.get_by_natural_key("W01-V01-000001")
        assert subarea.area_id == area.id
        assert unit.subarea_id == subarea.id
        assert (member.unit_id, member.subarea_id, member.area_id) == (unit.id, subarea.id, area.id)
        assert len(area.id) == 36

    def test_member_stamped_with_device_and_sync_time(self, session, remote_stores, settings, seeded):
        session.run_upload()

        member = remote_stores.members.get_by_natural_key("W01-V01-000001")
        assert member.device_id == settings.get_device_id()
        assert member.synced_at is not None

    def test_second_upload_creates_nothing(self, session, remote_stores, seeded):
        session.run_upload()
        before = _remote_state(remote_stores)
        inserts = [s.insert_count for s in (remote_stores.areas, remote_stores.subareas,
                                            remote_stores.units, remote_stores.members)]

        result = session.run_upload()

        assert result.success
        assert result.uploaded.total == 4
        assert [s.insert_count for s in (remote_stores.areas, remote_stores.subareas,
                                         remote_stores.units, remote_stores.members)] == inserts
        assert _remote_state(remote_stores) == before

    def test_matched_remote_record_is_overwritten(self, session, remote_stores, local_stores):
        remote_stores.areas.insert(RemoteArea(id="existing-id", code="W01", name="Old name"))
        local_stores.areas.insert(Area(code="W01", name="North"))

        session.run_upload()

        area = remote_stores.areas.get_by_natural_key("W01")
        assert area.id == "existing-id"
        assert area.name == "North"
        assert remote_stores.areas.insert_count == 1

    def test_failed_area_skips_children(self, session, remote_stores, seeded):
        remote_stores.areas.fail_keys.add("W01")

        result = session.run_upload()

        assert not result.success
        kinds = [(e.kind, e.entity_type, e.natural_key) for e in result.errors]
        assert kinds == [
            ("UnknownError", "areas", "W01"),
            ("ParentNotFoundError", "subareas", "V01"),
            ("ParentNotFoundError", "units", "H001"),
            ("ParentNotFoundError", "members", "W01-V01-000001"),
        ]
        assert remote_stores.subareas.list() == []
        assert remote_stores.members.list() == []
        assert result.uploaded.total == 0

    def test_one_bad_record_does_not_stop_the_tier(self, session, remote_stores, local_stores):
        local_stores.areas.insert(Area(code="W01", name=""))
        local_stores.areas.insert(Area(code="W02", name="South"))

        result = session.run_upload()

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], ValidationError)
        assert result.errors[0].natural_key == "W01"
        assert result.uploaded.areas == 1
        assert remote_stores.areas.get_by_natural_key("W02") is not None

    def test_blank_natural_key_skipped(self, session, remote_stores, local_stores):
        local_stores.areas.insert(Area(code="   ", name="Unnamed"))
        local_stores.areas.insert(Area(code="W02", name="South"))

        result = session.run_upload()

        assert [type(e) for e in result.errors] == [ValidationError]
        assert result.errors[0].entity_type == "areas"
        assert result.uploaded.areas == 1
        assert remote_stores.areas.insert_count == 1
        assert remote_stores.areas.get_by_natural_key("W02") is not None

    def test_member_without_code_skipped(self, session, remote_stores, local_stores, seeded):
        local_stores.members.insert(Member(
            member_code="",
            unit_id=seeded["unit"].id, subarea_id=seeded["subarea"].id, area_id=seeded["area"].id,
            first_name="Ana", last_name="Kove",
        ))

        result = session.run_upload()

        assert [type(e) for e in result.errors] == [ValidationError]
        assert result.errors[0].entity_type == "members"
        assert result.uploaded.members == 1
        assert [m.member_code for m in remote_stores.members.list()] == ["W01-V01-000001"]

    def test_inconsistent_member_ancestry_rejected(self, session, remote_stores, local_stores, seeded):
        other = Subarea(area_id=seeded["area"].id, code="V02", name="Hillside")
        local_stores.subareas.insert(other)
        local_stores.members.insert(Member(
            member_code="W01-V02-000001",
            unit_id=seeded["unit"].id,  # H001 lives in V01
            subarea_id=other.id, area_id=seeded["area"].id,
            first_name="Ana", last_name="Kove",
        ))

        result = session.run_upload()

        assert [type(e) for e in result.errors] == [ValidationError]
        assert result.errors[0].natural_key == "W01-V02-000001"
        assert result.uploaded.members == 1
        assert remote_stores.members.get_by_natural_key("W01-V02-000001") is None

    def test_unit_of_unsynced_subarea(self, session, remote_stores, local_stores, seeded):
        remote_stores.subareas.fail_keys.add("V02")
        other = Subarea(area_id=seeded["area"].id, code="V02", name="Hillside")
        local_stores.subareas.insert(other)
        local_stores.units.insert(Unit(subarea_id=other.id, code="H002", head_name="Kove"))

        result = session.run_upload()

        parent_errors = [e for e in result.errors if isinstance(e, ParentNotFoundError)]
        assert [e.natural_key for e in parent_errors] == ["H002"]
        assert remote_stores.units.get_by_natural_key("H002") is None
        assert remote_stores.units.get_by_natural_key("H001") is not None


class TestAttachments:

    def _with_photo(self, local_stores, seeded, data=b"\xff\xd8photo"):
        member = seeded["member"]
        member.photo = data
        local_stores.members.update(member.id, member)

    def test_photo_uploaded_and_locator_stored(self, session, remote_stores, media_store,
                                               local_stores, seeded):
        self._with_photo(local_stores, seeded)

        result = session.run_upload()

        member = remote_stores.members.get_by_natural_key("W01-V01-000001")
        assert result.success
        assert member.photo_url.startswith("memory://member-photos/W01-V01-000001-")
        assert member.fingerprint_url is None
        assert media_store.objects[member.photo_url] == b"\xff\xd8photo"

    def test_attachment_failure_is_a_warning(self, session, remote_stores, media_store,
                                             local_stores, seeded):
        self._with_photo(local_stores, seeded)
        media_store.fail_uploads = True

        result = session.run_upload()

        assert result.success
        assert result.uploaded.members == 1
        assert result.errors == []
        assert len(result.warnings) == 1
        assert isinstance(result.warnings[0], MediaTransferError)
        assert result.warnings[0].natural_key == "W01-V01-000001"
        assert remote_stores.members.get_by_natural_key("W01-V01-000001") is not None

    def test_failed_reupload_keeps_previous_locator(self, session, remote_stores, media_store,
                                                    local_stores, seeded):
        self._with_photo(local_stores, seeded)
        session.run_upload()
        first_url = remote_stores.members.get_by_natural_key("W01-V01-000001").photo_url

        media_store.fail_uploads = True
        session.run_upload()

        assert remote_stores.members.get_by_natural_key("W01-V01-000001").photo_url == first_url

    def test_reupload_replaces_attachment_object(self, session, remote_stores, media_store,
                                                 local_stores, seeded, monkeypatch):
        clock = itertools.count(1700000000)
        monkeypatch.setattr("services.media_syncer.time",
                            SimpleNamespace(time=lambda: float(next(clock))))
        self._with_photo(local_stores, seeded)
        session.run_upload()
        before = _remote_state(remote_stores)

        result = session.run_upload()

        after = _remote_state(remote_stores)
        key = ("members", "W01-V01-000001")
        assert result.success
        assert remote_stores.members.insert_count == 1
        assert after[key]["photo_url"] != before[key]["photo_url"]
        assert len(media_store.objects) == 2
        assert media_store.objects[after[key]["photo_url"]] == b"\xff\xd8photo"
        for state in (before, after):
            state[key].pop("photo_url")
        assert after == before
