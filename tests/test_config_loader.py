"""Tests for the roster configuration loader."""

import json
from decimal import Decimal

import pytest

from capacity.errors import ValidationError
from data.config_loader import load_roster_config, sync_roster_from_config

ROSTER = {
    "projects": [
        {
            "key": "PLAT",
            "name": "Platform",
            "weights": {"wfh": 0.85},
            "teams": [
                {
                    "name": "Core",
                    "members": [
                        {
                            "display_name": "Alice",
                            "email": "alice@example.com",
                            "work_mode": "Office",
                        },
                        {
                            "display_name": "Bob",
                            "work_mode": "wfh",
                            "default_availability_percent": 80,
                        },
                    ],
                }
            ],
        }
    ]
}


@pytest.fixture
def roster_file(tmp_path):
    path = tmp_path / "teams.json"
    path.write_text(json.dumps(ROSTER))
    return path


class TestLoadRosterConfig:
    def test_missing_file(self, tmp_path):
        assert load_roster_config(tmp_path / "absent.json") == {"projects": []}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ValidationError):
            load_roster_config(path)


class TestSyncRoster:
    def test_creates_roster(self, db, roster_file):
        from app.models import Project, TeamMember, Util

        stats = sync_roster_from_config(roster_file)

        assert stats["projects_created"] == 1
        assert stats["teams_created"] == 1
        assert stats["members_created"] == 2

        project = Project.query.filter_by(key="PLAT").one()
        assert project.wfh_weight == Decimal("0.85")
        assert project.office_weight is None

        bob = TeamMember.query.filter_by(display_name="Bob").one()
        assert bob.default_availability_percent == 80
        assert TeamMember.query.filter_by(email="alice@example.com").one().work_mode == "office"

        assert Util.get_last_roster_sync() is not None

    def test_second_sync_updates(self, db, roster_file):
        from app.models import TeamMember

        sync_roster_from_config(roster_file)
        stats = sync_roster_from_config(roster_file)

        assert stats["projects_created"] == 0
        assert stats["projects_updated"] == 1
        assert stats["members_updated"] == 2
        assert TeamMember.query.count() == 2

    def test_invalid_member_rolls_back(self, db, tmp_path):
        from app.models import Project

        bad = {
            "projects": [
                {
                    "key": "BAD",
                    "teams": [
                        {
                            "name": "Team",
                            "members": [
                                {"display_name": "Eve", "default_availability_percent": 150}
                            ],
                        }
                    ],
                }
            ]
        }
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(bad))

        with pytest.raises(ValidationError):
            sync_roster_from_config(path)
        assert Project.query.count() == 0

    def test_sync_route(self, app, client, roster_file, monkeypatch):
        monkeypatch.setitem(app.config, "ROSTER_CONFIG_PATH", str(roster_file))

        response = client.post("/sync")

        assert response.status_code == 200
        data = response.get_json()
        assert data["stats"]["members_created"] == 2
        assert data["last_roster_sync"] is not None
