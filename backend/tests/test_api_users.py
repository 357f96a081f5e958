"""Tests for the user directory API endpoints."""

from datetime import datetime

import httpx


class TestListUsers:
    """Tests for GET /api/users"""

    def test_returns_200_empty(self, client):
        """Should return an empty page with one total page."""
        response = client.get("/api/users")
        assert response.status_code == 200
        data = response.json()
        assert data["data"] == []
        assert data["meta"] == {
            "itemsPerPage": 10,
            "totalItems": 0,
            "currentPage": 1,
            "totalPages": 1,
            "hasNextPage": False,
            "hasPreviousPage": False,
        }
        assert data["links"]["next"] is None
        assert data["links"]["previous"] is None

    def test_returns_users(self, client, make_user):
        """Should return users with their fields."""
        make_user(first_name="John")

        response = client.get("/api/users")
        assert response.status_code == 200
        data = response.json()
        assert len(data["data"]) == 1
        assert data["data"][0]["first_name"] == "John"
        assert data["data"][0]["full_name"] == "John Tester1"

    def test_excludes_soft_deleted(self, client, make_user):
        """Soft-deleted users are not listed."""
        make_user(first_name="Kept")
        make_user(first_name="Gone", deleted_at=datetime(2024, 6, 1))

        data = client.get("/api/users").json()
        assert [u["first_name"] for u in data["data"]] == ["Kept"]
        assert data["meta"]["totalItems"] == 1

    def test_pagination(self, client, make_user):
        """Should paginate results and build links."""
        for _ in range(5):
            make_user()

        response = client.get("/api/users?page=1&limit=2&department=eng")
        assert response.status_code == 200
        data = response.json()
        assert len(data["data"]) == 2
        assert data["meta"]["totalItems"] == 5
        assert data["meta"]["totalPages"] == 3
        assert data["meta"]["hasNextPage"] is True

        next_url = httpx.URL(data["links"]["next"])
        assert next_url.host == "testserver"
        assert next_url.path == "/api/users"
        assert next_url.params["page"] == "2"
        assert next_url.params["limit"] == "2"
        assert next_url.params["department"] == "eng"

    def test_search(self, client, make_user):
        """Should match the search term against name, email and phone."""
        make_user(email="john@example.com")
        make_user(phone="+19998887777")
        make_user()

        by_email = client.get("/api/users?q=JOHN").json()
        by_phone = client.get("/api/users?q=888777").json()

        assert [u["email"] for u in by_email["data"]] == ["john@example.com"]
        assert [u["phone"] for u in by_phone["data"]] == ["+19998887777"]

    def test_orders_by_created_at(self, client, make_user):
        """Newest first by default, oldest first with order=ASC."""
        first = make_user()
        last = make_user()

        desc = client.get("/api/users").json()["data"]
        asc = client.get("/api/users?order=asc").json()["data"]

        assert desc[0]["user_id"] == str(last.user_id)
        assert asc[0]["user_id"] == str(first.user_id)

    def test_malformed_paging_is_clamped(self, client, make_user):
        """Malformed or out-of-range parameters never fail the request."""
        make_user()

        response = client.get("/api/users?limit=abc&page=-4&order=sideways")
        assert response.status_code == 200
        meta = response.json()["meta"]
        assert meta["itemsPerPage"] == 10
        assert meta["currentPage"] == 1

    def test_limit_capped_at_100(self, client):
        """Requested limits above 100 are capped."""
        response = client.get("/api/users?limit=5000")
        assert response.status_code == 200
        assert response.json()["meta"]["itemsPerPage"] == 100
        assert "limit=100" in response.json()["links"]["current"]

    def test_huge_page_returns_empty_page(self, client, make_user):
        """A page number too large for the database still answers 200."""
        make_user()

        response = client.get("/api/users?page=99999999999999999999")
        assert response.status_code == 200
        data = response.json()
        assert data["data"] == []
        assert data["meta"]["totalItems"] == 1
        assert data["meta"]["hasNextPage"] is False


class TestUserActivity:
    """Tests for GET /api/users/activity"""

    def test_attaches_comment_counts(self, client, make_user, make_comment):
        """Each user carries the number of comments written."""
        writer = make_user()
        reader = make_user()
        make_comment(writer)
        make_comment(writer)

        response = client.get("/api/users/activity")
        assert response.status_code == 200
        data = response.json()
        counts = {row["user_id"]: row["comment_count"] for row in data["data"]}
        assert counts == {str(writer.user_id): 2, str(reader.user_id): 0}
        assert data["meta"]["totalItems"] == 2

    def test_search_and_paging(self, client, make_user, make_comment):
        """Search and paging work in merge mode too."""
        for _ in range(3):
            make_comment(make_user(department_name="Platform"))
        make_user(first_name="Needle")

        searched = client.get("/api/users/activity?q=needle").json()
        paged = client.get("/api/users/activity?limit=3&page=2").json()

        assert [u["first_name"] for u in searched["data"]] == ["Needle"]
        assert searched["data"][0]["comment_count"] == 0
        assert paged["meta"]["totalItems"] == 4
        assert len(paged["data"]) == 1
        assert paged["meta"]["hasPreviousPage"] is True


class TestHealth:
    """Tests for GET /health"""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
