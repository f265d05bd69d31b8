"""
Tests for new-job alert rendering and fan-out.
"""

from app.core.celery_app import JOB_ALERTS_TASK, celery_app
from app.core.config import settings
from app.models.job import Job
from app.models.user import UserRole
from app.services.job_alerts import (
    NOT_SPECIFIED,
    fan_out,
    format_salary,
    render_job_alert,
    render_template,
    send_job_alerts,
)
from app.tasks.notification_tasks import send_job_alerts_task


class RecordingMailer:
    """Mailer double that records sends and fails for chosen addresses."""

    def __init__(self, fail_for=(), raise_for=()):
        self.fail_for = set(fail_for)
        self.raise_for = set(raise_for)
        self.sent = []

    def send_email(self, to_email, subject, html_body, text_body):
        if to_email in self.raise_for:
            raise RuntimeError("SES exploded")
        self.sent.append({"to": to_email, "subject": subject, "html": html_body, "text": text_body})
        return to_email not in self.fail_for


class TestRendering:

    def test_all_fields(self):
        job = Job(id=1, title="Backend Engineer", company="Acme", location="Remote", salary=120000)

        message = render_job_alert(job)

        assert message["subject"] == "New job posted: Backend Engineer"
        for part in (message["text_body"], message["html_body"]):
            assert "Backend Engineer" in part
            assert "Acme" in part
            assert "Remote" in part
            assert "120,000" in part
            assert "{{" not in part

    def test_missing_optional_fields_read_not_specified(self):
        job = Job(id=2, title="Intern")

        text = render_job_alert(job)["text_body"]

        assert f"Company: {NOT_SPECIFIED}" in text
        assert f"Location: {NOT_SPECIFIED}" in text
        assert f"Salary: {NOT_SPECIFIED}" in text

    def test_html_body_escapes_job_text(self):
        job = Job(id=3, title="<script>alert(1)</script>", company="Smith & Sons")

        message = render_job_alert(job)

        assert "<script>" not in message["html_body"]
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in message["html_body"]
        assert "Smith &amp; Sons" in message["html_body"]
        assert "Company: Smith & Sons" in message["text_body"]

    def test_render_template_replaces_every_occurrence(self):
        assert render_template("{{a}}-{{a}}-{{b}}", {"a": "x", "b": "y"}) == "x-x-y"

    def test_format_salary(self):
        assert format_salary(None) == NOT_SPECIFIED
        assert format_salary(95000.0) == "95,000"
        assert format_salary(1234.5) == "1,234.50"


class TestFanOut:

    def test_one_message_per_recipient(self, create_user):
        recipients = [create_user(email=f"u{i}@example.com") for i in range(3)]
        mailer = RecordingMailer()
        job = Job(id=1, title="Engineer")

        outcomes = fan_out(job, recipients, mailer)

        assert outcomes == {"u0@example.com": True, "u1@example.com": True, "u2@example.com": True}
        assert [m["to"] for m in mailer.sent] == ["u0@example.com", "u1@example.com", "u2@example.com"]

    def test_failures_are_isolated(self, create_user):
        recipients = [create_user(email=f"u{i}@example.com") for i in range(3)]
        mailer = RecordingMailer(fail_for={"u0@example.com"}, raise_for={"u1@example.com"})

        outcomes = fan_out(Job(id=1, title="Engineer"), recipients, mailer)

        assert outcomes == {"u0@example.com": False, "u1@example.com": False, "u2@example.com": True}


class TestSendJobAlerts:

    def test_only_recipient_role_is_mailed(self, db_session, create_user, create_job):
        create_user(email="seeker@example.com", role=UserRole.USER)
        create_user(email="admin@example.com", role=UserRole.ADMIN)
        job = create_job(title="Data Engineer")
        mailer = RecordingMailer()

        outcomes = send_job_alerts(db_session, job.id, recipient_role="user", mailer=mailer)

        assert outcomes == {"seeker@example.com": True}
        assert "Data Engineer" in mailer.sent[0]["subject"]

    def test_missing_job_sends_nothing(self, db_session, create_user):
        create_user(email="seeker@example.com")
        mailer = RecordingMailer()

        outcomes = send_job_alerts(db_session, 424242, recipient_role="user", mailer=mailer)

        assert outcomes == {}
        assert mailer.sent == []


class TestAlertTaskConfiguration:

    def test_task_registered_with_its_own_time_limits(self):
        assert send_job_alerts_task.name == JOB_ALERTS_TASK
        assert "app.tasks.notification_tasks" in celery_app.conf.include

        limits = celery_app.conf.task_annotations[JOB_ALERTS_TASK]
        assert limits["time_limit"] == settings.JOB_ALERT_TASK_TIME_LIMIT
        assert limits["soft_time_limit"] < limits["time_limit"]
        assert celery_app.conf.task_acks_late is False
