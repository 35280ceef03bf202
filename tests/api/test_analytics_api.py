"""
Tests for analytics API endpoints.
"""


class TestAnalyticsAPI:
    """Test organizer analytics endpoints."""

    def test_dashboard(self, client, organizer, attendee, paid_ticket, booking_factory, auth_headers):
        booking_factory(attendee, paid_ticket, quantity=4)

        response = client.get("/api/analytics/dashboard", headers=auth_headers(organizer))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["overview"]["total_revenue"] == 100.0
        assert data["overview"]["total_tickets_sold"] == 4
        assert data["charts"]["revenue_by_event"][0]["event_name"] == "Summer Music Festival"
        assert data["recent_bookings"][0]["attendee_name"] == attendee.full_name

    def test_dashboard_requires_organizer(self, client, attendee, auth_headers):
        response = client.get("/api/analytics/dashboard", headers=auth_headers(attendee))

        assert response.status_code == 403

    def test_event_analytics(self, client, organizer, attendee, paid_ticket, booking_factory, auth_headers):
        booking_factory(attendee, paid_ticket, quantity=10)

        response = client.get(f"/api/analytics/events/{paid_ticket.event_id}", headers=auth_headers(organizer))

        assert response.status_code == 200
        overview = response.json()["data"]["overview"]
        assert overview["total_tickets_sold"] == 10
        assert overview["total_capacity"] == 100
        assert overview["percentage_sold"] == 10

    def test_event_analytics_cross_organizer_forbidden(self, client, other_organizer, published_event, auth_headers):
        response = client.get(f"/api/analytics/events/{published_event.id}", headers=auth_headers(other_organizer))

        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to view analytics"

    def test_event_analytics_missing_event(self, client, organizer, auth_headers):
        response = client.get("/api/analytics/events/9999", headers=auth_headers(organizer))

        assert response.status_code == 404
