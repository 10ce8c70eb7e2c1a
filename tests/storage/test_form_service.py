"""Tests for FormService."""

import json

import pytest
from botocore.exceptions import ClientError

from form_builder.domain.slug import slugify
from form_builder.storage.form_service import FORM_PREFIX, form_key


def test_form_key():
    assert form_key("my-test-form") == "form/my-test-form.json"


class TestSaveLoad:
    def test_round_trip_by_slug(self, fake_s3, form_service, sample_spec):
        form_id = slugify(sample_spec["name"])

        result = form_service.save_form(form_id, sample_spec)

        assert form_id == "my-test-form"
        assert result == {"key": "form/my-test-form.json"}
        assert json.loads(fake_s3.objects["form/my-test-form.json"]) == sample_spec
        assert form_service.load_form(form_id) == sample_spec

    def test_save_overwrites(self, form_service):
        form_service.save_form("survey", {"name": "Survey", "sections": []})
        form_service.save_form("survey", {"name": "Survey v2", "sections": []})
        assert form_service.load_form("survey")["name"] == "Survey v2"

    def test_load_missing(self, form_service):
        assert form_service.load_form("nope") is None

    def test_exists(self, form_service):
        form_service.save_form("survey", {"name": "Survey"})
        assert form_service.form_exists("survey")
        assert not form_service.form_exists("other")


class TestListForms:
    @pytest.fixture
    def stored(self, form_service, fake_s3):
        form_service.save_form("alpha", {"name": "Alpha", "status": "published"})
        form_service.save_form("beta", {"name": "Beta", "status": "draft"})
        form_service.save_form("gamma", {"name": "Gamma"})
        fake_s3.objects[f"{FORM_PREFIX}broken.json"] = b"{not json"
        fake_s3.objects[f"{FORM_PREFIX}notes.txt"] = b"ignored"
        return form_service

    def test_hides_drafts_by_default(self, stored):
        assert stored.list_forms() == [
            {"id": "alpha", "name": "Alpha", "status": "published"},
            {"id": "broken", "name": "broken"},
            {"id": "gamma", "name": "Gamma"},
        ]

    def test_includes_drafts_on_request(self, stored):
        ids = [form["id"] for form in stored.list_forms(include_unpublished=True)]
        assert ids == ["alpha", "beta", "broken", "gamma"]

    def test_name_falls_back_to_id(self, form_service):
        form_service.save_form("unnamed", {"sections": []})
        assert form_service.list_forms() == [{"id": "unnamed", "name": "unnamed"}]

    def test_empty_bucket(self, form_service):
        assert form_service.list_forms() == []


class TestDelete:
    def test_delete_then_load(self, form_service):
        form_service.save_form("survey", {"name": "Survey"})
        form_service.delete_form("survey")
        assert form_service.load_form("survey") is None

    def test_delete_missing_succeeds(self, form_service):
        form_service.delete_form("never-existed")

    def test_delete_storage_error_raises(self, fake_s3, form_service):
        fake_s3.fail("delete_object", "AccessDenied")
        with pytest.raises(ClientError):
            form_service.delete_form("survey")
