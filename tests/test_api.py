"""
Vetlyst Backend — API Endpoint Tests
======================================

What:  HTTP-level behaviour through the real app, in-memory database and a
       recording email sender.

What we test:
    ✅ Directory listing: filters, search, rating sort, headers
    ✅ Clinic detail by slug and 404 body
    ✅ Appointment / claim submission: 200 shapes, 400 error body
    ✅ Submissions succeed even when every email fails
    ✅ Admin lists (both paths) newest first
    ✅ Health check
"""

import pytest


class TestClinicDirectory:

    @pytest.mark.asyncio
    async def test_city_filter(self, test_client, seeded_clinics):
        response = await test_client.get("/api/clinics", params={"city": "Madison", "search": "Ace"})

        assert response.status_code == 200
        assert [clinic["name"] for clinic in response.json()] == ["Ace Vet"]
        assert response.headers["X-Total-Count"] == "1"

    @pytest.mark.asyncio
    async def test_default_sort_is_by_name(self, test_client, seeded_clinics):
        response = await test_client.get("/api/clinics")
        names = [clinic["name"] for clinic in response.json()]
        assert names == ["Ace Vet", "Badger Animal Hospital", "Lakeside Emergency Vet"]
        assert response.headers["Cache-Control"] == "public, max-age=300"

    @pytest.mark.asyncio
    async def test_rating_sort_puts_unrated_last(self, test_client, seeded_clinics):
        response = await test_client.get("/api/clinics", params={"sortBy": "rating"})
        names = [clinic["name"] for clinic in response.json()]
        assert names == ["Badger Animal Hospital", "Ace Vet", "Lakeside Emergency Vet"]

    @pytest.mark.asyncio
    async def test_type_filter_is_case_insensitive_substring(self, test_client, seeded_clinics):
        response = await test_client.get("/api/clinics", params={"clinicType": "EMERGENCY"})
        assert [clinic["name"] for clinic in response.json()] == ["Lakeside Emergency Vet"]

    @pytest.mark.asyncio
    async def test_listing_carries_slug_and_featured_flag(self, test_client, seeded_clinics):
        response = await test_client.get("/api/clinics", params={"search": "badger"})
        clinic = response.json()[0]
        assert clinic["slug"] == "badger-animal-hospital-ChIJB4dg"
        assert clinic["is_featured"] is True
        assert clinic["accepts_appointments"] is True

    @pytest.mark.asyncio
    async def test_no_match_is_empty_list(self, test_client, seeded_clinics):
        response = await test_client.get("/api/clinics", params={"city": "Nowhere"})
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_cities(self, test_client, seeded_clinics):
        response = await test_client.get("/api/cities")
        assert response.json() == ["Madison", "Middleton"]

    @pytest.mark.asyncio
    async def test_clinic_by_slug(self, test_client, seeded_clinics):
        response = await test_client.get("/api/clinics/ace-vet-ChIJN1t_")
        assert response.status_code == 200
        assert response.json()["place_id"] == "ChIJN1t_tDeuEmsRUsoyG83frY4"

    @pytest.mark.asyncio
    async def test_unknown_slug_is_404(self, test_client, seeded_clinics):
        response = await test_client.get("/api/clinics/nonexistent-00000000")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["request_id"] == response.headers["X-Request-ID"]


class TestAppointmentRequests:

    @pytest.mark.asyncio
    async def test_missing_fields_is_400(self, test_client):
        response = await test_client.post("/api/appointment-request", json={"petOwnerName": "Jane"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Missing required fields: petOwnerEmail, petOwnerPhone"
        assert body["details"]["fields"] == ["petOwnerEmail", "petOwnerPhone"]

    @pytest.mark.asyncio
    async def test_submit_stores_and_notifies_clinic(self, test_client, fake_sender):
        response = await test_client.post(
            "/api/appointment-request",
            json={
                "clinicId": "ChIJB4dgr0000000000000001",
                "clinicName": "Badger Animal Hospital",
                "clinicEmail": "frontdesk@badgeranimal.example",
                "petOwnerName": "Jane Doe",
                "petOwnerEmail": "jane@example.com",
                "petOwnerPhone": "608-555-0100",
                "preferredDate": "2024-03-18",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Appointment request submitted successfully"
        assert body["data"][0]["status"] == "pending"
        assert [email["to"] for email in fake_sender.sent] == ["frontdesk@badgeranimal.example"]

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_request(self, test_client, fake_sender):
        fake_sender.fail = True
        response = await test_client.post(
            "/api/appointment-request",
            json={
                "clinicEmail": "frontdesk@badgeranimal.example",
                "petOwnerName": "Jane Doe",
                "petOwnerEmail": "jane@example.com",
                "petOwnerPhone": "608-555-0100",
            },
        )
        assert response.status_code == 200

        listed = await test_client.get("/api/appointments")
        assert len(listed.json()) == 1


class TestClinicClaims:

    CLAIM = {
        "clinicId": "ChIJN1t_tDeuEmsRUsoyG83frY4",
        "clinicName": "Ace Vet",
        "claimantName": "Dr. Sam Lee",
        "claimantEmail": "sam@acevet.example",
        "claimantRole": "owner",
        "verificationMethod": "phone",
    }

    @pytest.mark.asyncio
    async def test_claim_succeeds_when_every_email_fails(self, test_client, fake_sender):
        fake_sender.fail = True
        response = await test_client.post("/api/claim-clinic", json=self.CLAIM)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        claim_id = body["claimId"]

        claims = (await test_client.get("/api/claims")).json()
        assert [claim["id"] for claim in claims] == [claim_id]
        assert claims[0]["status"] == "pending"
        assert len(fake_sender.attempts) == 2

    @pytest.mark.asyncio
    async def test_missing_fields_is_400(self, test_client):
        response = await test_client.post("/api/claim-clinic", json={"clinicId": "x"})
        assert response.status_code == 400
        assert response.json()["details"]["fields"] == [
            "clinicName",
            "claimantName",
            "claimantEmail",
            "claimantRole",
            "verificationMethod",
        ]

    @pytest.mark.asyncio
    async def test_admin_path_lists_newest_first(self, test_client):
        for name in ("First Vet", "Second Vet"):
            await test_client.post("/api/claim-clinic", json=dict(self.CLAIM, clinicName=name))

        response = await test_client.get("/api/admin/claims")
        assert response.status_code == 200
        assert response.headers["Cache-Control"] == "no-store"
        assert [claim["clinic_name"] for claim in response.json()] == ["Second Vet", "First Vet"]


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_components(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["database"] == "connected"
        assert body["email"] == "available"
        assert body["status"] == "healthy"

    def test_suite_database_is_in_memory(self):
        """The module-level engine used by /health must not write files into the working directory."""
        from vetlyst.config import settings

        assert settings.database_url == "sqlite+aiosqlite:///:memory:"
