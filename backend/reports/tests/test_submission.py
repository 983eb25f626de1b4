"""
Service tests — ``ReportSubmissionService.submit``.

External collaborators are replaced by in-memory fakes (see the root
``conftest.py``); only authentication and category validation may make
a submission fail.
"""

from __future__ import annotations

import pytest
from django.contrib.auth.models import AnonymousUser

from core.domain.exceptions import DomainError, Unauthorized
from reports.models import Department, Priority, Report, ReportStatus
from reports.services import ReportSubmissionService

pytestmark = pytest.mark.django_db


@pytest.fixture()
def citizen(create_user):
    return create_user(username="citizen", role_name="Citizen")


@pytest.fixture()
def submit(fake_media_store, fake_classifier, fake_locator):
    def _submit(actor, **data):
        return ReportSubmissionService.submit(
            actor,
            data,
            media_store=fake_media_store,
            classifier=fake_classifier,
            locator=fake_locator,
        )

    return _submit


class TestSubmitHappyPath:

    def test_routes_to_department_supervisor(self, submit, citizen, create_user):
        supervisor = create_user(username="water_sup", role_name="Supervisor")
        Department.objects.create(key="water", name="Water", supervisor=supervisor)

        report = submit(
            citizen,
            issue_type="water",
            description="Burst main flooding the street",
            latitude=35.7,
            longitude=51.4,
        )

        report.refresh_from_db()
        assert report.status == ReportStatus.SUBMITTED
        assert report.assigned_dept == "water"
        assert report.assigned_to == supervisor
        assert report.assigned_to_worker is None
        assert report.issue_label == "Water / Drainage"
        assert report.custom_issue == ""
        assert report.priority == Priority.HIGH
        assert report.location == (35.7, 51.4)
        assert report.history.count() == 0

    def test_uploads_image_and_audio(self, submit, citizen, fake_media_store):
        report = submit(
            citizen,
            issue_type="road",
            description="Pothole",
            image=b"\xff\xd8jpeg",
            image_mime_type="image/png",
            audio=b"voice",
        )

        assert report.image_url == "https://media.test/1.png"
        assert report.audio_url == "https://media.test/2.m4a"
        assert fake_media_store.uploads == [(b"\xff\xd8jpeg", "image/png"), (b"voice", "audio/m4a")]

    def test_others_uses_custom_issue_as_label(self, submit, citizen):
        report = submit(citizen, issue_type="others", custom_issue="Stray dogs", description="")

        assert report.issue_label == "Stray dogs"
        assert report.custom_issue == "Stray dogs"
        assert report.assigned_dept == "others"
        assert report.assigned_to is None

    def test_others_falls_back_to_description(self, submit, citizen):
        report = submit(citizen, issue_type="others", description="Broken bench in the square")

        assert report.issue_label == "Other"
        assert report.custom_issue == "Broken bench in the square"

    def test_department_without_supervisor_leaves_assignee_empty(self, submit, citizen):
        report = submit(citizen, issue_type="streetlight", description="Lamp out")

        assert report.assigned_dept == "electrical"
        assert report.assigned_to is None


class TestSubmitDegradation:

    def test_image_upload_failure_still_persists(self, submit, citizen, fake_media_store):
        fake_media_store.fail_on = ("image",)

        report = submit(
            citizen, issue_type="road", description="Pothole",
            image=b"jpeg", audio=b"voice",
        )

        report.refresh_from_db()
        assert report.image_url is None
        assert report.audio_url == "https://media.test/1.m4a"
        assert report.status == ReportStatus.SUBMITTED

    def test_classifier_failure_gives_not_specified(self, submit, citizen, fake_classifier):
        fake_classifier.label = None

        report = submit(citizen, issue_type="road", description="Pothole")

        assert report.priority == Priority.NOT_SPECIFIED

    def test_classifier_unknown_label_gives_not_specified(self, submit, citizen, fake_classifier):
        fake_classifier.label = "Critical"

        report = submit(citizen, issue_type="road", description="Pothole")

        assert report.priority == Priority.NOT_SPECIFIED

    def test_classifier_receives_description(self, submit, citizen, fake_classifier):
        submit(citizen, issue_type="tree", description="Fallen tree blocks lane")

        assert fake_classifier.calls == ["Fallen tree blocks lane"]

    def test_location_from_provider_when_not_supplied(self, submit, citizen, fake_locator):
        fake_locator.location = (12.5, 77.6)

        report = submit(citizen, issue_type="road", description="Pothole")

        assert (report.latitude, report.longitude) == (12.5, 77.6)

    def test_location_failure_leaves_coordinates_empty(self, submit, citizen):
        report = submit(citizen, issue_type="road", description="Pothole")

        assert report.location is None

    def test_configured_collaborators_without_credentials_degrade(self, citizen, offline_collaborators):
        report = ReportSubmissionService.submit(
            citizen, {"issue_type": "road", "description": "Pothole", "image": b"jpeg"},
        )

        assert report.image_url is None
        assert report.priority == Priority.NOT_SPECIFIED
        assert report.location is None


class TestSubmitRejections:

    def test_anonymous_actor_is_unauthorized(self, submit):
        with pytest.raises(Unauthorized):
            submit(AnonymousUser(), issue_type="road", description="Pothole")
        with pytest.raises(Unauthorized):
            submit(None, issue_type="road", description="Pothole")
        assert Report.objects.count() == 0

    @pytest.mark.parametrize("issue_type", ["default", "volcano", "", None])
    def test_unknown_category_is_rejected(self, submit, citizen, issue_type):
        with pytest.raises(DomainError):
            submit(citizen, issue_type=issue_type, description="Something")
        assert Report.objects.count() == 0

    def test_others_without_text_is_rejected(self, submit, citizen, fake_media_store):
        with pytest.raises(DomainError):
            submit(citizen, issue_type="others", custom_issue="  ", description="", image=b"x")
        assert Report.objects.count() == 0
        assert fake_media_store.uploads == []
