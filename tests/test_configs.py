"""
Network Design Planner - Generated Configuration Tests
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Tests for generate, regenerate, apply, delete and deployment status.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from netplanner.core.exceptions import ConflictError
from netplanner.models.generated_config import GeneratedConfiguration
from netplanner.models.template import ConfigurationTemplate, TemplateDeployment
from netplanner.services.config_service import ConfigService


def _generate(client, template, design, equipment, headers, values=None):
    body = {
        "designId": design.id,
        "equipmentId": equipment.id,
        "configType": "vlan",
    }
    if values is not None:
        body["variableValues"] = values
    return client.post(f"/api/v1/configs/{template.id}/generate", json=body, headers=headers)


@pytest.fixture
def generated(client: TestClient, owner_headers, vlan_template, sample_design, sample_switch) -> dict:
    """A generated "vlan 10" configuration."""
    response = _generate(client, vlan_template, sample_design, sample_switch, owner_headers, {"id": "10"})
    assert response.status_code == 201
    return response.json()["data"]


class TestGenerate:
    """Tests for POST /api/v1/configs/{templateId}/generate"""

    def test_generate(self, generated):
        """Rendering stores the configuration unapplied."""
        assert generated["configuration"] == "vlan 10"
        assert generated["variable_values"] == {"id": "10"}
        assert generated["is_applied"] is False
        assert generated["applied_at"] is None
        assert generated["generated_by"] == "user-1"
        assert generated["parent_config_id"] is None

    def test_default_used(self, client, owner_headers, hostname_template, sample_design, sample_switch):
        """Defaults fill variables without overrides."""
        response = _generate(
            client, hostname_template, sample_design, sample_switch, owner_headers, {"hostname": "core1"}
        )
        assert response.status_code == 201
        assert response.json()["data"]["configuration"] == "hostname core1\nip domain-name corp.local"

    def test_optional_without_value_renders_empty(
        self, client, owner_headers, vlan_template, sample_design, sample_switch
    ):
        """Optional variables with no value or default resolve to empty text."""
        response = _generate(client, vlan_template, sample_design, sample_switch, owner_headers)
        assert response.status_code == 201
        assert response.json()["data"]["configuration"] == "vlan "

    def test_required_missing(self, client, owner_headers, hostname_template, sample_design, sample_switch):
        """A required variable with no override or default is a validation error."""
        response = _generate(client, hostname_template, sample_design, sample_switch, owner_headers, {})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_undeclared_placeholder_in_stored_template(
        self, client, db_session: Session, owner_headers, sample_design, sample_switch
    ):
        """Stored templates with undeclared placeholders are rejected before rendering."""
        template = ConfigurationTemplate(
            owner_id="user-1",
            name="Broken",
            vendor="Cisco",
            equipment_category="switch",
            config_type="vlan",
            template="vlan {{id}} {{name}}",
            variables=[{"name": "id"}],
        )
        db_session.add(template)
        db_session.commit()

        response = _generate(client, template, sample_design, sample_switch, owner_headers, {"id": "5"})
        assert response.status_code == 400
        assert response.json()["error"]["details"]["undeclared"] == ["name"]

    def test_missing_template(self, client, owner_headers, sample_design, sample_switch):
        """Unknown templates are 404."""
        response = client.post(
            "/api/v1/configs/999/generate",
            json={"designId": sample_design.id, "equipmentId": sample_switch.id, "configType": "vlan"},
            headers=owner_headers,
        )
        assert response.status_code == 404

    def test_design_of_other_user(self, client, other_headers, db_session: Session, sample_design, sample_switch):
        """The target design must belong to the caller."""
        template = ConfigurationTemplate(
            owner_id="user-2", name="Mine", vendor="Cisco", equipment_category="switch",
            config_type="vlan", template="vlan {{id}}", variables=[{"name": "id"}],
        )
        db_session.add(template)
        db_session.commit()

        response = _generate(client, template, sample_design, sample_switch, other_headers, {"id": "1"})
        assert response.status_code == 404
        assert response.json()["error"]["details"]["resource"] == "Design"

    def test_missing_equipment(self, client, owner_headers, vlan_template, sample_design):
        """The target equipment must exist."""
        response = client.post(
            f"/api/v1/configs/{vlan_template.id}/generate",
            json={"designId": sample_design.id, "equipmentId": 999, "configType": "vlan"},
            headers=owner_headers,
        )
        assert response.status_code == 404


class TestRegenerate:
    """Tests for POST /api/v1/configs/{id}/regenerate"""

    def test_generate_then_regenerate(self, client, owner_headers, generated):
        """Regeneration creates a linked record and leaves the source untouched."""
        response = client.post(
            f"/api/v1/configs/{generated['id']}/regenerate",
            json={"variableValues": {"id": "20"}},
            headers=owner_headers,
        )

        assert response.status_code == 201
        new = response.json()["data"]
        assert new["configuration"] == "vlan 20"
        assert new["parent_config_id"] == generated["id"]
        assert new["id"] != generated["id"]

        original = client.get(f"/api/v1/configs/{generated['id']}", headers=owner_headers).json()["data"]
        assert original["configuration"] == "vlan 10"

    def test_prior_values_kept(self, client, owner_headers, hostname_template, sample_design, sample_switch):
        """New overrides merge over the prior values."""
        first = _generate(
            client, hostname_template, sample_design, sample_switch, owner_headers,
            {"hostname": "core1", "domain": "lab.local"},
        ).json()["data"]

        response = client.post(
            f"/api/v1/configs/{first['id']}/regenerate",
            json={"variableValues": {"hostname": "core2"}},
            headers=owner_headers,
        )
        assert response.json()["data"]["configuration"] == "hostname core2\nip domain-name lab.local"

    def test_regenerate_without_body(self, client, owner_headers, generated):
        """The body is optional."""
        response = client.post(f"/api/v1/configs/{generated['id']}/regenerate", headers=owner_headers)
        assert response.status_code == 201
        assert response.json()["data"]["configuration"] == "vlan 10"

    def test_regenerate_not_owner(self, client, other_headers, generated):
        """Only the owner of the source record may regenerate it."""
        response = client.post(
            f"/api/v1/configs/{generated['id']}/regenerate",
            json={"variableValues": {"id": "30"}},
            headers=other_headers,
        )
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_regenerate_missing_source(self, client, owner_headers):
        """Unknown source records are 404."""
        response = client.post("/api/v1/configs/999/regenerate", json={}, headers=owner_headers)
        assert response.status_code == 404

    def test_regenerate_missing_template(self, client, db_session: Session, owner_headers, generated):
        """A source whose template is gone is 404."""
        db_session.query(ConfigurationTemplate).delete()
        db_session.commit()

        response = client.post(f"/api/v1/configs/{generated['id']}/regenerate", json={}, headers=owner_headers)
        assert response.status_code == 404
        assert response.json()["error"]["details"]["resource"] == "Template"


class TestApply:
    """Tests for PATCH /api/v1/configs/{id}/apply"""

    def test_apply(self, client, owner_headers, generated):
        """Applying sets the flag and stamps the time."""
        response = client.patch(
            f"/api/v1/configs/{generated['id']}/apply", json={"notes": "pushed"}, headers=owner_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_applied"] is True
        assert data["applied_at"] is not None
        assert data["notes"] == "pushed"

    def test_apply_idempotent(self, client, owner_headers, generated):
        """A second apply keeps the first applied_at."""
        first = client.patch(f"/api/v1/configs/{generated['id']}/apply", json={}, headers=owner_headers)
        second = client.patch(f"/api/v1/configs/{generated['id']}/apply", json={}, headers=owner_headers)

        assert second.status_code == 200
        assert second.json()["data"]["applied_at"] == first.json()["data"]["applied_at"]
        assert second.json()["data"]["is_applied"] is True

    def test_reapply_overwrites_notes(self, client, owner_headers, generated):
        """Notes given on a repeat apply replace the stored notes."""
        first = client.patch(
            f"/api/v1/configs/{generated['id']}/apply", json={"notes": "first"}, headers=owner_headers
        )
        second = client.patch(
            f"/api/v1/configs/{generated['id']}/apply", json={"notes": "second"}, headers=owner_headers
        )

        assert second.json()["data"]["notes"] == "second"
        assert second.json()["data"]["applied_at"] == first.json()["data"]["applied_at"]

    def test_apply_other_user(self, client, other_headers, generated):
        """Apply is scoped to the caller."""
        response = client.patch(f"/api/v1/configs/{generated['id']}/apply", json={}, headers=other_headers)
        assert response.status_code == 404

    def test_apply_missing(self, client, owner_headers):
        """Unknown records are 404."""
        response = client.patch("/api/v1/configs/999/apply", headers=owner_headers)
        assert response.status_code == 404


class TestDelete:
    """Tests for DELETE /api/v1/configs/{id}"""

    def test_delete_unapplied(self, client, owner_headers, generated):
        """Unapplied records can be deleted and are gone afterwards."""
        response = client.delete(f"/api/v1/configs/{generated['id']}", headers=owner_headers)
        assert response.status_code == 204
        assert response.content == b""

        response = client.get(f"/api/v1/configs/{generated['id']}", headers=owner_headers)
        assert response.status_code == 404

    def test_delete_applied_conflict(self, client, owner_headers, generated):
        """Applied records cannot be deleted and stay intact."""
        client.patch(f"/api/v1/configs/{generated['id']}/apply", json={}, headers=owner_headers)

        response = client.delete(f"/api/v1/configs/{generated['id']}", headers=owner_headers)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

        record = client.get(f"/api/v1/configs/{generated['id']}", headers=owner_headers).json()["data"]
        assert record["configuration"] == "vlan 10"
        assert record["is_applied"] is True

    def test_delete_other_user(self, client, other_headers, generated):
        """Records of other users cannot be deleted."""
        response = client.delete(f"/api/v1/configs/{generated['id']}", headers=other_headers)
        assert response.status_code == 403

    def test_delete_missing(self, client, owner_headers):
        """Unknown records are 404."""
        response = client.delete("/api/v1/configs/999", headers=owner_headers)
        assert response.status_code == 404

    def test_delete_after_concurrent_apply(self, db_session: Session, generated):
        """A delete that loses to an apply fails with conflict."""
        service = ConfigService(db_session)
        # The record is loaded (unapplied) before the apply lands
        stale = db_session.get(GeneratedConfiguration, generated["id"])
        assert stale.is_applied is False

        db_session.query(GeneratedConfiguration).filter(
            GeneratedConfiguration.id == generated["id"]
        ).update({"is_applied": True}, synchronize_session=False)
        db_session.commit()

        with pytest.raises(ConflictError):
            service.delete_config(generated["id"], "user-1")
        assert db_session.get(GeneratedConfiguration, generated["id"]) is not None


class TestListConfigs:
    """Tests for GET /api/v1/configs"""

    def test_list_newest_first(self, client, owner_headers, generated):
        """Records are listed newest first and can be filtered."""
        client.post(
            f"/api/v1/configs/{generated['id']}/regenerate",
            json={"variableValues": {"id": "20"}},
            headers=owner_headers,
        )

        data = client.get("/api/v1/configs", headers=owner_headers).json()
        assert [r["configuration"] for r in data["data"]] == ["vlan 20", "vlan 10"]
        assert data["meta"]["pagination"]["total"] == 2

        unapplied = client.get(
            "/api/v1/configs", params={"applied": "false", "templateId": generated["template_id"]},
            headers=owner_headers,
        ).json()["data"]
        assert len(unapplied) == 2

    def test_list_scoped_to_caller(self, client, other_headers, generated):
        """Other users' records are not listed."""
        assert client.get("/api/v1/configs", headers=other_headers).json()["data"] == []


class TestDeploymentStatus:
    """Tests for PATCH /api/v1/configs/{templateId}/deployments/{deploymentId}"""

    @pytest.fixture
    def deployment(self, db_session: Session, vlan_template, sample_switch) -> TemplateDeployment:
        deployment = TemplateDeployment(
            template_id=vlan_template.id,
            device_id=sample_switch.id,
            deployed_by="user-1",
            variables={"id": "10"},
            rendered_config="vlan 10",
            notes="initial push",
        )
        db_session.add(deployment)
        db_session.commit()
        db_session.refresh(deployment)
        return deployment

    def _patch(self, client, template_id, deployment_id, body, headers):
        return client.patch(
            f"/api/v1/configs/{template_id}/deployments/{deployment_id}", json=body, headers=headers
        )

    def test_activate(self, client, owner_headers, vlan_template, deployment):
        """Moving to active stamps activated_at."""
        response = self._patch(client, vlan_template.id, deployment.id, {"status": "active"}, owner_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "active"
        assert data["activated_at"] is not None

    def test_permissive_transitions(self, client, owner_headers, vlan_template, deployment):
        """rolled-back may go straight back to active."""
        for status in ("active", "rolled-back", "active", "pending", "failed"):
            response = self._patch(client, vlan_template.id, deployment.id, {"status": status}, owner_headers)
            assert response.status_code == 200
            assert response.json()["data"]["status"] == status

    def test_notes_appended(self, client, owner_headers, vlan_template, deployment):
        """Notes are appended on a new line."""
        response = self._patch(
            client, vlan_template.id, deployment.id,
            {"status": "failed", "notes": "port flapped"}, owner_headers,
        )
        assert response.json()["data"]["notes"] == "initial push\nport flapped"

    def test_invalid_status(self, client, owner_headers, vlan_template, deployment):
        """Statuses outside the enumeration are rejected."""
        response = self._patch(client, vlan_template.id, deployment.id, {"status": "done"}, owner_headers)
        assert response.status_code == 400

    def test_deployment_of_other_template(
        self, client, owner_headers, hostname_template, deployment
    ):
        """The deployment must belong to the template in the path."""
        response = self._patch(client, hostname_template.id, deployment.id, {"status": "active"}, owner_headers)
        assert response.status_code == 404

    def test_missing_deployment(self, client, owner_headers, vlan_template):
        """Unknown deployments are 404."""
        response = self._patch(client, vlan_template.id, 999, {"status": "active"}, owner_headers)
        assert response.status_code == 404
