"""
Vetlyst Backend — Slug Codec Tests
====================================

What we test:
    ✅ encode() cleaning rules and determinism
    ✅ Short place ids and names with nothing sluggable
    ✅ decode() takes the final segment
    ✅ resolve() round trip against a real (SQLite) database
    ✅ Unknown slug raises NotFoundError
    ✅ Prefix collisions resolve to the earliest-imported clinic
"""

from datetime import datetime, timedelta, timezone

import pytest

from vetlyst.exceptions import NotFoundError
from vetlyst.services import slug


class TestEncode:

    def test_cleans_name_and_truncates_id(self):
        assert slug.encode("Dr. Smith's Clinic!!", "abcdefgh1234") == "dr-smith-s-clinic-abcdefgh"

    def test_is_deterministic(self):
        first = slug.encode("Ace Vet Clinic", "ChIJN1t_tDeuEmsRUsoyG83frY4")
        second = slug.encode("Ace Vet Clinic", "ChIJN1t_tDeuEmsRUsoyG83frY4")
        assert first == second == "ace-vet-clinic-ChIJN1t_"

    def test_short_id_shorter_than_length_is_used_whole(self):
        assert slug.encode("Paws", "abc") == "paws-abc"

    def test_name_without_slug_chars_still_carries_id(self):
        assert slug.encode("!!!", "abcdefgh1234") == "-abcdefgh"

    def test_runs_of_separators_collapse(self):
        assert slug.encode("  Cats & Dogs -- 24/7  ", "X1234567") == "cats-dogs-24-7-X1234567"

    def test_custom_length(self):
        assert slug.encode("Ace", "abcdefgh1234", length=4) == "ace-abcd"


class TestDecode:

    def test_returns_last_segment(self):
        assert slug.decode("dr-smith-s-clinic-abcdefgh") == "abcdefgh"

    def test_slug_without_dash_is_its_own_id(self):
        assert slug.decode("abcdefgh") == "abcdefgh"

    def test_trailing_dash_yields_empty_id(self):
        assert slug.decode("ace-vet-") == ""


class TestResolve:

    @pytest.mark.asyncio
    async def test_round_trip(self, db_session, seeded_clinics):
        """Every stored clinic resolves from its own encoded slug."""
        for clinic in seeded_clinics:
            found = await slug.resolve(db_session, slug.encode(clinic.name, clinic.place_id))
            assert found.place_id == clinic.place_id

    @pytest.mark.asyncio
    async def test_name_part_is_ignored(self, db_session, seeded_clinics):
        found = await slug.resolve(db_session, "old-name-ChIJN1t_")
        assert found.name == "Ace Vet"

    @pytest.mark.asyncio
    async def test_unknown_slug_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await slug.resolve(db_session, "nonexistent-00000000")
        assert "nonexistent-00000000" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_empty_short_id_does_not_match(self, db_session, seeded_clinics):
        assert await slug.resolve_by_prefix(db_session, "") is None
        with pytest.raises(NotFoundError):
            await slug.resolve(db_session, "ace-vet-")

    @pytest.mark.asyncio
    async def test_match_is_case_sensitive(self, db_session, seeded_clinics):
        assert await slug.resolve_by_prefix(db_session, "chijn1t_") is None

    @pytest.mark.asyncio
    async def test_wildcards_match_literally(self, db_session, seeded_clinics):
        assert await slug.resolve_by_prefix(db_session, "%") is None
        assert await slug.resolve_by_prefix(db_session, "ChIJ____") is None

    @pytest.mark.asyncio
    async def test_collision_resolves_to_earliest_created(self, db_session, clinic_factory):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        db_session.add_all([
            clinic_factory(place_id="SAMEPREFIXlater", name="Later Vet", created_at=base + timedelta(days=1)),
            clinic_factory(place_id="SAMEPREFIXearly", name="Early Vet", created_at=base),
        ])
        await db_session.commit()

        found = await slug.resolve(db_session, "later-vet-SAMEPREF")
        assert found.name == "Early Vet"
