"""
New-job alert emails.

One shared template, rendered once per job, sent once per recipient.
"""

import html
import logging
from typing import Dict, Iterable, Optional, Protocol

from sqlalchemy.orm import Session

from app.crud import job as job_crud
from app.crud import user as user_crud
from app.models.job import Job
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Not specified"

JOB_ALERT_SUBJECT = "New job posted: {{title}}"

JOB_ALERT_TEXT = """A new job was just posted on the board.

Title: {{title}}
Company: {{company}}
Location: {{location}}
Salary: {{salary}}

Sign in to see all open positions.
"""

JOB_ALERT_HTML = """<!DOCTYPE html>
<html>
<head><meta charset="UTF-8"><title>New job posted</title></head>
<body style="font-family: Arial, sans-serif; color: #333333;">
    <h2 style="margin: 0 0 16px 0;">{{title}}</h2>
    <table role="presentation" style="border-collapse: collapse;">
        <tr><td style="padding: 4px 12px 4px 0;"><strong>Company</strong></td><td>{{company}}</td></tr>
        <tr><td style="padding: 4px 12px 4px 0;"><strong>Location</strong></td><td>{{location}}</td></tr>
        <tr><td style="padding: 4px 12px 4px 0;"><strong>Salary</strong></td><td>{{salary}}</td></tr>
    </table>
    <p style="color: #999999; font-size: 12px;">Sign in to see all open positions.</p>
</body>
</html>
"""


class Mailer(Protocol):
    def send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        ...


def format_salary(salary: Optional[float]) -> str:
    if salary is None:
        return NOT_SPECIFIED
    if float(salary).is_integer():
        return f"{int(salary):,}"
    return f"{salary:,.2f}"


def job_placeholders(job: Job) -> Dict[str, str]:
    """Values for every template token; absent optional fields read "Not specified"."""
    return {
        "title": job.title,
        "company": job.company or NOT_SPECIFIED,
        "location": job.location or NOT_SPECIFIED,
        "salary": format_salary(job.salary),
    }


def render_template(template: str, values: Dict[str, str]) -> str:
    """Replace each {{name}} token with its value."""
    rendered = template
    for name, value in values.items():
        rendered = rendered.replace("{{" + name + "}}", value)
    return rendered


def render_job_alert(job: Job) -> Dict[str, str]:
    """Subject, HTML and text bodies for one job. Job text is HTML-escaped in the HTML body."""
    values = job_placeholders(job)
    html_values = {name: html.escape(value) for name, value in values.items()}
    return {
        "subject": render_template(JOB_ALERT_SUBJECT, values),
        "html_body": render_template(JOB_ALERT_HTML, html_values),
        "text_body": render_template(JOB_ALERT_TEXT, values),
    }


def fan_out(job: Job, recipients: Iterable[User], mailer: Mailer) -> Dict[str, bool]:
    """
    Send the alert for job to every recipient.

    A failure for one recipient is recorded and the loop moves on.

    Returns:
        Mapping of recipient email -> whether the send succeeded
    """
    message = render_job_alert(job)
    outcomes: Dict[str, bool] = {}

    for recipient in recipients:
        try:
            outcomes[recipient.email] = bool(mailer.send_email(to_email=recipient.email, **message))
        except Exception as e:
            logger.error(f"Job alert for job {job.id} to {recipient.email} failed: {e}")
            outcomes[recipient.email] = False

    sent = sum(1 for ok in outcomes.values() if ok)
    logger.info(f"Job alert for job {job.id}: {sent}/{len(outcomes)} sent")
    return outcomes


def send_job_alerts(db: Session, job_id: int, recipient_role: str, mailer: Mailer) -> Dict[str, bool]:
    """
    Load the job and its recipients, then fan out.

    A job deleted before this runs yields an empty mapping.
    """
    job = job_crud.get_by_id(db, job_id)
    if job is None:
        logger.warning(f"Job {job_id} no longer exists, skipping alerts")
        return {}

    recipients = user_crud.get_by_role(db, UserRole(recipient_role))
    return fan_out(job, recipients, mailer)
