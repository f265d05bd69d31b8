"""
AWS SES Email Service for outbound notifications.

Handles the SES integration; message content is rendered by the callers.
"""

import logging
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Service for sending emails via AWS SES.

    Supports both development (sandbox) and production modes.
    """

    def __init__(self):
        """Initialize AWS SES client"""
        session_kwargs = {
            'region_name': settings.AWS_REGION,
        }

        # Add credentials if provided (otherwise uses IAM role)
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            session_kwargs['aws_access_key_id'] = settings.AWS_ACCESS_KEY_ID
            session_kwargs['aws_secret_access_key'] = settings.AWS_SECRET_ACCESS_KEY

        self.ses_client = boto3.client('ses', **session_kwargs)

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str
    ) -> bool:
        """
        Send a single email.

        Args:
            to_email: Recipient email address
            subject: Subject line
            html_body: HTML part
            text_body: Plain text fallback part

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        try:
            response = self.ses_client.send_email(
                Source=f"{settings.AWS_SES_FROM_NAME} <{settings.AWS_SES_FROM_EMAIL}>",
                Destination={'ToAddresses': [to_email]},
                Message={
                    'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                    'Body': {
                        'Html': {'Data': html_body, 'Charset': 'UTF-8'},
                        'Text': {'Data': text_body, 'Charset': 'UTF-8'}
                    }
                }
            )

            message_id = response.get('MessageId')
            logger.info(f"Email sent to {to_email} (MessageId: {message_id})")
            return True

        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            logger.error(f"AWS SES ClientError: {error_code} - {error_message}")

            if error_code == 'MessageRejected':
                logger.error(f"Email rejected: {error_message}")
            elif error_code == 'MailFromDomainNotVerified':
                logger.error("Sender email not verified in SES")

            return False

        except BotoCoreError as e:
            logger.error(f"AWS BotoCoreError: {str(e)}")
            return False


# Singleton instance
email_service = EmailService()
