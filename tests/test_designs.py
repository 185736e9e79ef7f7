"""
Network Design Planner - Network Design Tests
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy.orm import Session

from netplanner.core.exceptions import NotFoundError
from netplanner.models.base import isoformat, utcnow
from netplanner.models.design import NetworkDesign
from netplanner.schemas.design import DesignUpdate
from netplanner.services.design_service import DesignService


class TestDesigns:
    """Tests for /api/v1/designs"""

    def test_create_design(self, client, owner_headers):
        """Designs are created for the caller with defaults filled in."""
        response = client.post(
            "/api/v1/designs",
            json={
                "designName": "Warehouse",
                "requirements": {
                    "totalUsers": "51-200",
                    "segments": [{"name": "Ops", "type": "function", "users": 40}],
                },
            },
            headers=owner_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user_id"] == "user-1"
        assert data["design_name"] == "Warehouse"
        assert data["status"] == "draft"
        assert data["requirements"]["total_users"] == "51-200"
        assert data["requirements"]["segments"][0]["name"] == "Ops"
        assert data["requirements"]["dhcp_server"] is False

    def test_create_requires_name(self, client, owner_headers):
        response = client.post("/api/v1/designs", json={}, headers=owner_headers)
        assert response.status_code == 400

    def test_invalid_user_bracket(self, client, owner_headers):
        response = client.post(
            "/api/v1/designs",
            json={"designName": "X", "requirements": {"totalUsers": "lots"}},
            headers=owner_headers,
        )
        assert response.status_code == 400

    def test_list_scoped_to_caller(self, client, owner_headers, other_headers, sample_design):
        own = client.get("/api/v1/designs", headers=owner_headers).json()
        assert [d["id"] for d in own["data"]] == [sample_design.id]
        assert own["meta"]["total"] == 1

        assert client.get("/api/v1/designs", headers=other_headers).json()["data"] == []

    def test_get_design(self, client, owner_headers, sample_design):
        response = client.get(f"/api/v1/designs/{sample_design.id}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["data"]["design_name"] == "Office A"

    def test_get_other_users_design(self, client, other_headers, sample_design):
        """Designs of other users look missing."""
        response = client.get(f"/api/v1/designs/{sample_design.id}", headers=other_headers)
        assert response.status_code == 404

    def test_update_keeps_omitted_fields(self, client, owner_headers, sample_design):
        """Only fields present in the body are replaced."""
        response = client.put(
            f"/api/v1/designs/{sample_design.id}",
            json={"status": "in_progress"},
            headers=owner_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "in_progress"
        assert data["design_name"] == "Office A"
        assert data["requirements"]["total_users"] == "1-50"

    def test_update_replaces_requirements(self, client, owner_headers, sample_design):
        """Requirements are replaced as a whole document."""
        data = client.put(
            f"/api/v1/designs/{sample_design.id}",
            json={"requirements": {"totalUsers": "500+"}},
            headers=owner_headers,
        ).json()["data"]

        assert data["requirements"]["total_users"] == "500+"
        assert data["requirements"]["segments"] == []

    def test_update_invalid_status(self, client, owner_headers, sample_design):
        response = client.put(
            f"/api/v1/designs/{sample_design.id}", json={"status": "shipped"}, headers=owner_headers
        )
        assert response.status_code == 400

    def test_update_other_user(self, client, other_headers, sample_design):
        response = client.put(
            f"/api/v1/designs/{sample_design.id}", json={"designName": "Mine"}, headers=other_headers
        )
        assert response.status_code == 404

    def test_requires_identity(self, client):
        response = client.get("/api/v1/designs")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_REQUIRED"

    @pytest.mark.parametrize("field", ["designName", "status", "isExistingNetwork", "requirements"])
    def test_update_null_rejected(self, client, db_session: Session, owner_headers, sample_design, field):
        """An explicit null for a required field is bad input and changes nothing."""
        response = client.put(
            f"/api/v1/designs/{sample_design.id}", json={field: None}, headers=owner_headers
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

        db_session.expire_all()
        design = db_session.get(NetworkDesign, sample_design.id)
        assert design.design_name == "Office A"
        assert design.status == "draft"
        assert design.requirements["total_users"] == "1-50"

    def test_update_null_description_clears(self, client, owner_headers, sample_design):
        """Optional fields can still be cleared."""
        data = client.put(
            f"/api/v1/designs/{sample_design.id}", json={"description": None}, headers=owner_headers
        ).json()["data"]

        assert data["description"] is None
        assert data["design_name"] == "Office A"


class TestDesignService:
    """Tests for DesignService"""

    def test_update_applies_only_set_fields(self, db_session: Session, sample_design):
        service = DesignService(db_session)
        design = service.update_design(
            sample_design.id, "user-1", DesignUpdate(description="Branch")
        )

        assert design.description == "Branch"
        assert design.design_name == "Office A"
        assert design.requirements["segments"][0]["name"] == "Staff"

    def test_other_owner_not_found(self, db_session: Session, sample_design):
        with pytest.raises(NotFoundError):
            DesignService(db_session).get_owned_design(sample_design.id, "user-2")


class TestTimestamps:
    """Tests for UTC timestamps"""

    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo is UTC

    def test_naive_stored_value_serialized_as_utc(self):
        assert isoformat(datetime(2024, 5, 1, 12, 0)) == "2024-05-01T12:00:00+00:00"

    def test_health_timestamp_is_utc(self, client):
        assert client.get("/health").json()["timestamp"].endswith("+00:00")

    def test_design_timestamps_are_utc(self, client, owner_headers, sample_design):
        data = client.get(f"/api/v1/designs/{sample_design.id}", headers=owner_headers).json()["data"]
        assert data["updated_at"].endswith("+00:00")
