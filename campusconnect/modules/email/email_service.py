"""
Email Service Module
====================

Configurable email service supporting Resend, Amazon SES, and SMTP (e.g. Gmail).
Provider is selected via EMAIL_PROVIDER config ('resend', 'ses', or 'smtp').
All branding is configurable through Flask app config.
"""

import re
import html
import logging
import time
from typing import List, Optional, Dict
from datetime import datetime

# Rejects consecutive dots, leading/trailing dots in local part
_VALID_EMAIL = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$')

logger = logging.getLogger(__name__)

# Try to import resend - it's optional
try:
    import resend
    RESEND_AVAILABLE = True
except ImportError:
    RESEND_AVAILABLE = False
    logger.info("resend package not installed.")

# Try to import boto3 for SES - it's optional
try:
    import boto3
    from botocore.exceptions import ClientError
    BOTO3_AVAILABLE = True
except ImportError:
    BOTO3_AVAILABLE = False
    logger.info("boto3 package not installed.")


def is_valid_email(address: str) -> bool:
    """Check an address against the sender-side format rules"""
    if not address or len(address) > 255:
        return False
    return _VALID_EMAIL.match(address) is not None


class EmailService:
    """
    Configurable email service supporting Resend, Amazon SES, and SMTP (e.g. Gmail).

    Configuration (set in Flask app.config):
        EMAIL_PROVIDER: 'resend' (default), 'ses', or 'smtp'
        RESEND_API_KEY: Your Resend API key (required if provider is 'resend')
        AWS_REGION: AWS region for SES (default: 'eu-west-1', only needed if provider is 'ses')
        EMAIL_HOST: SMTP server host (default: 'smtp.gmail.com', only needed if provider is 'smtp')
        EMAIL_PORT: SMTP server port (default: 587, only needed if provider is 'smtp')
        EMAIL_PASSWORD: SMTP password/app password (required if provider is 'smtp')
        EMAIL_ADDRESS: Sender email address (default: onboarding@resend.dev)
        EMAIL_BRAND_NAME: Brand name for emails (default: 'CampusConnect')
        EMAIL_BRAND_TAGLINE: Brand tagline (default: '')
        EMAIL_WEBSITE_URL: Website URL (default: 'http://localhost:5000')
        EMAIL_SEND_DELAY: Seconds to wait between recipients (default: 0.6)
        EMAIL_STYLE: Dict of colour/font overrides for the HTML templates
    """

    def __init__(self, app=None):
        self.provider = 'resend'
        self.api_key = None
        self.ses_client = None
        self.smtp_host = None
        self.smtp_port = 587
        self.smtp_password = None
        self.sender_email = None
        self.brand_name = 'CampusConnect'
        self.brand_tagline = ''
        self.website_url = 'http://localhost:5000'
        self.send_delay = 0.6
        self.style = {}

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize email service with Flask app configuration"""
        self.provider = (app.config.get('EMAIL_PROVIDER') or 'resend').lower()
        logger.info(f"=== INITIALIZING EMAIL SERVICE (provider: {self.provider}) ===")

        self.sender_email = app.config.get('EMAIL_ADDRESS', 'onboarding@resend.dev')
        self.brand_name = app.config.get('EMAIL_BRAND_NAME', 'CampusConnect')
        self.brand_tagline = app.config.get('EMAIL_BRAND_TAGLINE', '')
        self.website_url = app.config.get('EMAIL_WEBSITE_URL', 'http://localhost:5000')
        self.send_delay = float(app.config.get('EMAIL_SEND_DELAY', 0.6))

        custom_style = app.config.get('EMAIL_STYLE') or {}
        self.style = {
            'bg': custom_style.get('bg', '#0f172a'),
            'card_bg': custom_style.get('card_bg', '#ffffff'),
            'header_bg': custom_style.get('header_bg', '#064e3b'),
            'header_text': custom_style.get('header_text', '#ffffff'),
            'text': custom_style.get('text', '#1e293b'),
            'text_secondary': custom_style.get('text_secondary', '#64748b'),
            'accent': custom_style.get('accent', '#10b981'),
            'border': custom_style.get('border', '#e2e8f0'),
            'btn_bg': custom_style.get('btn_bg', '#10b981'),
            'btn_text': custom_style.get('btn_text', '#ffffff'),
            'font': custom_style.get('font', "'Inter', 'Helvetica', sans-serif"),
        }

        logger.info(f"Sender email: {self.sender_email}")
        logger.info(f"Brand name: {self.brand_name}")

        # Only one provider is active at a time; anything unknown falls back to Resend
        if self.provider == 'ses':
            self._init_ses(app)
        elif self.provider == 'smtp':
            self._init_smtp(app)
        else:
            self._init_resend(app)

    def _init_resend(self, app):
        """Initialize Resend provider"""
        self.api_key = app.config.get('RESEND_API_KEY')

        if not self.api_key:
            logger.warning("RESEND_API_KEY not configured - email sending disabled")
            return

        if not RESEND_AVAILABLE:
            logger.error("resend package not installed")
            return

        resend.api_key = self.api_key
        logger.info("Resend API client initialized successfully")

    def _init_ses(self, app):
        """Initialize Amazon SES provider"""
        if not BOTO3_AVAILABLE:
            logger.error("boto3 package not installed - SES email sending disabled")
            return

        aws_region = app.config.get('AWS_REGION', 'eu-west-1')
        try:
            self.ses_client = boto3.client('ses', region_name=aws_region)
            logger.info(f"SES client initialized successfully (region: {aws_region})")
        except Exception as e:
            logger.error(f"Failed to initialize SES client: {e}")

    def _init_smtp(self, app):
        """Initialize SMTP provider (e.g. Gmail)"""
        self.smtp_host = app.config.get('EMAIL_HOST', 'smtp.gmail.com')
        self.smtp_port = int(app.config.get('EMAIL_PORT', 587))
        self.smtp_password = app.config.get('EMAIL_PASSWORD')

        if not self.smtp_password:
            logger.warning("EMAIL_PASSWORD not configured - SMTP email sending disabled")
            return

        logger.info(f"SMTP configured: {self.smtp_host}:{self.smtp_port}")

    @property
    def is_configured(self) -> bool:
        """True when the active provider has the credentials it needs"""
        if self.provider == 'ses':
            return self.ses_client is not None
        if self.provider == 'smtp':
            return bool(self.smtp_password)
        return bool(self.api_key) and RESEND_AVAILABLE

    # ==================== Sending ====================

    def send_each(self, to: List[str], subject: str, html_body: str,
                  text_body: Optional[str] = None) -> Dict[str, bool]:
        """
        Send the same message to each recipient individually.

        Returns:
            dict: recipient -> True if the provider accepted the message
        """
        results = {}
        if not to:
            logger.error("No recipients provided")
            return results

        if not self.sender_email:
            logger.error("Sender email not configured")
            return {addr: False for addr in to}

        for i, recipient in enumerate(to):
            if not is_valid_email(recipient):
                logger.warning(f"Skipping invalid email address: {recipient}")
                results[recipient] = False
                continue

            logger.info(f"Sending email from: {self.sender_email} to: {recipient}")
            try:
                if self.provider == 'ses':
                    success = self._send_via_ses(recipient, subject, html_body, text_body)
                elif self.provider == 'smtp':
                    success = self._send_via_smtp(recipient, subject, html_body, text_body)
                else:
                    success = self._send_via_resend(recipient, subject, html_body, text_body)
            except Exception as send_error:
                logger.error(f"Error sending to {recipient}: {send_error}")
                success = False

            results[recipient] = success

            # Rate limit between sends
            if self.send_delay and i < len(to) - 1:
                time.sleep(self.send_delay)

        sent_count = sum(1 for ok in results.values() if ok)
        failed_count = len(results) - sent_count
        if failed_count > 0:
            logger.warning(f"Email send completed with errors: {sent_count} sent, {failed_count} failed")
        else:
            logger.info(f"Email sent successfully to {sent_count} recipients: {subject}")

        return results

    def send_email(self, to: List[str], subject: str, html_body: str,
                   text_body: Optional[str] = None) -> bool:
        """
        Send an email to multiple recipients via the configured provider.

        Returns:
            bool: True if at least one email was sent successfully, False otherwise
        """
        return any(self.send_each(to, subject, html_body, text_body).values())

    def _send_via_resend(self, recipient: str, subject: str, html_body: str,
                         text_body: Optional[str] = None) -> bool:
        """Send a single email via Resend API"""
        if not RESEND_AVAILABLE:
            logger.error("resend package not installed")
            return False

        if not self.api_key:
            logger.error("Resend API key not configured")
            return False

        email_params = {
            "from": self.sender_email,
            "to": recipient,
            "subject": subject,
            "html": html_body
        }
        if text_body:
            email_params["text"] = text_body

        r = resend.Emails.send(email_params)
        logger.info(f"Resend response: {r}")

        if r and r.get('id'):
            return True
        logger.error(f"Resend error for {recipient}: {r}")
        return False

    def _send_via_ses(self, recipient: str, subject: str, html_body: str,
                      text_body: Optional[str] = None) -> bool:
        """Send a single email via Amazon SES"""
        if not BOTO3_AVAILABLE:
            logger.error("boto3 package not installed")
            return False

        if not self.ses_client:
            logger.error("SES client not initialized")
            return False

        body = {'Html': {'Charset': 'UTF-8', 'Data': html_body}}
        if text_body:
            body['Text'] = {'Charset': 'UTF-8', 'Data': text_body}

        try:
            response = self.ses_client.send_email(
                Source=self.sender_email,
                Destination={'ToAddresses': [recipient]},
                Message={
                    'Subject': {'Charset': 'UTF-8', 'Data': subject},
                    'Body': body,
                },
            )
            logger.info(f"SES response MessageId: {response.get('MessageId', '')}")
            return True
        except ClientError as e:
            logger.error(f"SES error for {recipient}: {e.response['Error']['Message']}")
            return False

    def _send_via_smtp(self, recipient: str, subject: str, html_body: str,
                       text_body: Optional[str] = None) -> bool:
        """Send a single email via SMTP (e.g. Gmail)"""
        import smtplib
        from email.mime.text import MIMEText
        from email.mime.multipart import MIMEMultipart

        if not self.smtp_password:
            logger.error("SMTP password not configured")
            return False

        msg = MIMEMultipart('alternative')
        msg['From'] = self.sender_email
        msg['To'] = recipient
        msg['Subject'] = subject

        if text_body:
            msg.attach(MIMEText(text_body, 'plain', 'utf-8'))
        msg.attach(MIMEText(html_body, 'html', 'utf-8'))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.sender_email, self.smtp_password)
                server.send_message(msg)

            logger.info(f"SMTP email sent to {recipient}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP error for {recipient}: {e}")
            return False

    # ==================== Welcome Email ====================

    def welcome_message(self, name: Optional[str] = None):
        """Subject, HTML and text for the signup welcome email"""
        subject = f"Welcome to {self.brand_name}!"
        greeting = f"Welcome, {name or 'Friend'}"
        intro = (f"Thank you for subscribing to {self.brand_name} updates. "
                 f"You're on the waitlist and will be among the first to know when we launch.")

        html_body = self._wrap_template(subject, greeting, [intro])
        text_body = f"{greeting}\n\n{intro}\n\nThe {self.brand_name} Team\n"
        return subject, html_body, text_body

    def send_welcome_email(self, email: str, name: Optional[str] = None) -> bool:
        """Send welcome email to new subscriber"""
        subject, html_body, text_body = self.welcome_message(name)
        return self.send_email([email], subject, html_body, text_body)

    # ==================== Update Broadcast ====================

    def send_update_email(self, recipients: List[str], title: str, content: str) -> Dict[str, bool]:
        """Send an admin-written update to each recipient"""
        subject = f"{self.brand_name} Update: {title}"
        paragraphs = [p for p in content.split('\n\n') if p.strip()] or [content]
        html_body = self._wrap_template(subject, title, paragraphs)
        text_body = f"{title}\n\n{content}\n\nThe {self.brand_name} Team\n"
        return self.send_each(recipients, subject, html_body, text_body)

    # ==================== Launch Broadcast ====================

    def launch_message(self):
        """Title and content of the fixed launch announcement"""
        title = f"{self.brand_name} is Live! 🚀"
        content = (f"The wait is over: {self.brand_name} has officially launched. "
                   f"Thank you for being on the waitlist. Head over to {self.website_url} "
                   f"to get started.")
        return title, content

    def send_launch_email(self, recipients: List[str]) -> Dict[str, bool]:
        """Send the launch announcement to each recipient"""
        title, content = self.launch_message()
        html_body = self._wrap_template(title, title, [content], button_text='Get Started')
        text_body = f"{title}\n\n{content}\n\nThe {self.brand_name} Team\n"
        return self.send_each(recipients, title, html_body, text_body)

    def _wrap_template(self, page_title: str, heading: str, paragraphs: List[str],
                       button_text: str = 'Visit Website') -> str:
        """Shared HTML layout for all waitlist emails"""
        s = self.style
        body_html = '\n'.join(
            f'<p style="font-size: 16px; margin: 16px 0; line-height: 1.7;">{html.escape(p)}</p>'
            for p in paragraphs
        )
        return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(page_title)}</title>
</head>
<body style="font-family: {s['font']}; line-height: 1.6; color: {s['text']}; background: {s['bg']}; max-width: 600px; margin: 0 auto; padding: 24px;">
    <div style="background: {s['card_bg']}; border: 1px solid {s['border']}; border-radius: 12px; overflow: hidden;">
        <div style="background: {s['header_bg']}; color: {s['header_text']}; padding: 32px; text-align: center;">
            <h1 style="font-size: 24px; margin: 0 0 8px 0; letter-spacing: 1px;">{html.escape(self.brand_name)}</h1>
            {f'<p style="font-size: 14px; margin: 0; opacity: 0.8;">{html.escape(self.brand_tagline)}</p>' if self.brand_tagline else ''}
        </div>

        <div style="padding: 40px 32px;">
            <h2 style="font-size: 20px; margin: 0 0 24px 0; color: {s['text']};">{html.escape(heading)}</h2>
            {body_html}
            <p style="text-align: center; margin-top: 32px;">
                <a href="{self.website_url}" style="display: inline-block; background: {s['btn_bg']}; color: {s['btn_text']}; padding: 12px 24px; text-decoration: none; font-weight: bold; border-radius: 8px;">{button_text}</a>
            </p>
        </div>

        <div style="padding: 24px; text-align: center; font-size: 13px; color: {s['text_secondary']}; border-top: 1px solid {s['border']};">
            <p style="margin: 4px 0;">{html.escape(self.brand_name)} . {datetime.now().year}</p>
        </div>
    </div>
</body>
</html>
        """


# Global email service instance
email_service = EmailService()
