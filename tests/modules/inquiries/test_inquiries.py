"""Tests for career applications and investor inquiries."""

from unittest.mock import MagicMock

from modules.inquiries.repository import InquiryRepository
from shared.models import Role

APPLICATION = {
    "name": "Ada Vance",
    "email": "ada@example.com",
    "position": "Game Developer",
    "message": "I have shipped three space sims and would love to help.",
}
INQUIRY = {
    "name": "Ira Stone",
    "email": "ira@fund.example",
    "phone": "+1 555 010 0199",
    "investment_range": "$1M - $5M",
    "message": "We back independent studios building long-lived games.",
}


class TestInquiryRepository:

    def test_list_applies_filters_and_range(self, query_factory):
        db = MagicMock()
        query = query_factory([{"id": "a1"}], count=12)
        db.table.return_value = query

        rows, total = InquiryRepository(db).list_applications("pending", None, limit=5, offset=10)

        assert rows == [{"id": "a1"}]
        assert total == 12
        db.table.assert_called_with("career_applications")
        query.eq.assert_called_once_with("status", "pending")
        query.range.assert_called_once_with(10, 14)


class TestCareerRoutes:
    """Tests for /api/careers."""

    def test_submit_application(self, client, container):
        container.inquiries.create_application.return_value = {"id": "a1"}

        response = client.post(
            "/api/careers",
            json=APPLICATION,
            headers={"user-agent": "Mozilla/5.0", "x-forwarded-for": "203.0.113.4"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Application submitted successfully",
            "application_id": "a1",
        }
        metadata = container.inquiries.create_application.call_args.args[0]["metadata"]
        assert metadata == {
            "user_agent": "Mozilla/5.0",
            "submitted_from": "website",
            "ip_address": "203.0.113.4",
        }

    def test_message_too_short(self, client):
        response = client.post("/api/careers", json={**APPLICATION, "message": "Hire me"})
        assert response.status_code == 400

    def test_unknown_position(self, client):
        response = client.post("/api/careers", json={**APPLICATION, "position": "Astronaut"})
        assert response.status_code == 400

    def test_listing_requires_staff(self, client, sign_in):
        assert client.get("/api/careers").status_code == 401
        sign_in(role=Role.USER)
        response = client.get("/api/careers")
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden - Admin access required"

    def test_listing_for_staff(self, client, container, sign_in):
        sign_in(role=Role.STAFF)
        container.inquiries.list_applications.return_value = ([{"id": "a1"}], 1)

        body = client.get("/api/careers").json()

        assert body == {"success": True, "applications": [{"id": "a1"}], "total": 1, "limit": 50, "offset": 0}
        container.inquiries.list_applications.assert_called_once_with("pending", None, 50, 0)


class TestInvestorRoutes:
    """Tests for /api/investors."""

    def test_submit_inquiry(self, client, container):
        container.inquiries.create_investor_inquiry.return_value = {"id": "i1"}
        response = client.post("/api/investors", json=INQUIRY)
        assert response.status_code == 200
        assert response.json()["inquiry_id"] == "i1"

    def test_short_phone(self, client):
        assert client.post("/api/investors", json={**INQUIRY, "phone": "555"}).status_code == 400

    def test_listing_filters_by_range(self, client, container, sign_in):
        sign_in(role=Role.ADMIN)
        container.inquiries.list_investor_inquiries.return_value = ([], 0)
        client.get("/api/investors", params={"investment_range": "$5M+", "status": "reviewed"})
        container.inquiries.list_investor_inquiries.assert_called_once_with("reviewed", "$5M+", 50, 0)
