"""
Signup Form
===========

View state and submit logic for the landing page waitlist form.
The form never talks to the database directly; it goes through the
NotificationService so the same logic backs the HTML and JSON routes.
"""

import logging
from collections import namedtuple

from campusconnect.core.logging_service import db_log
from campusconnect.modules.email import is_valid_email
from campusconnect.modules.notifications import ServiceError, DuplicateSubscriberError

logger = logging.getLogger(__name__)

# Submit outcomes
MISSING = 'missing'
INVALID = 'invalid'
SUBSCRIBED = 'subscribed'
DUPLICATE = 'duplicate'
ERROR = 'error'

_CATEGORIES = {
    MISSING: 'warning',
    INVALID: 'warning',
    SUBSCRIBED: 'success',
    DUPLICATE: 'info',
    ERROR: 'error',
}


class SignupResult(namedtuple('SignupResult', ['outcome', 'title', 'message'])):
    """What the toast shows after a submit"""

    @property
    def category(self):
        return _CATEGORIES[self.outcome]

    @property
    def clears_form(self):
        return self.outcome in (SUBSCRIBED, DUPLICATE)


def _text(value):
    # Non-string JSON values count as missing
    return value.strip() if isinstance(value, str) else ''


def _truthy(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'on', 'yes')
    return bool(value)


class SignupForm:
    """First name, email and consent checkbox"""

    def __init__(self, first_name='', email='', notify=False):
        self.first_name = _text(first_name)
        self.email = _text(email)
        self.notify = _truthy(notify)

    @classmethod
    def from_data(cls, data):
        """Build from form fields or a JSON body (camelCase or snake_case keys)"""
        data = data or {}
        return cls(
            first_name=data.get('first_name') or data.get('firstName') or '',
            email=data.get('email') or '',
            notify=data.get('notify', data.get('consent', False)),
        )

    def is_complete(self):
        return bool(self.first_name and self.email and self.notify)

    def reset(self):
        self.first_name = ''
        self.email = ''
        self.notify = False

    def submit(self, service, brand_name='CampusConnect'):
        """Validate locally, then create the subscriber and log the welcome"""
        if not self.is_complete():
            return SignupResult(
                MISSING, 'Missing Information',
                'Please fill in all required fields and check the notification box.'
            )

        if not is_valid_email(self.email.lower()):
            return SignupResult(INVALID, 'Invalid Email', 'Please enter a valid email address.')

        name = self.first_name
        logger.info(f"Submitting notification request: {self.email}")

        try:
            subscriber = service.insert_subscriber({'email': self.email, 'first_name': name})
        except DuplicateSubscriberError:
            logger.info(f"Already subscribed: {self.email}")
            self.reset()
            return SignupResult(
                DUPLICATE, 'Already Subscribed! 🎉',
                f"{name}, you're already on our list! We'll notify you when {brand_name} launches."
            )
        except ServiceError as e:
            logger.error(f"Error submitting form: {e}")
            db_log('error', 'waitlist', 'Error submitting form', {'error': str(e)})
            return SignupResult(ERROR, 'Error', 'Something went wrong. Please try again.')

        # The subscription stands even if the welcome log write fails
        try:
            service.send_welcome(subscriber['email'], name)
        except ServiceError as e:
            logger.error(f"Failed to record welcome notification for {subscriber['email']}: {e}")
            db_log('error', 'waitlist', 'Failed to record welcome notification',
                   {'email': subscriber['email'], 'error': str(e)})

        email = subscriber['email']
        self.reset()
        return SignupResult(
            SUBSCRIBED, 'Success! 🚀',
            f"Thanks {name}! We'll notify you at {email} when {brand_name} launches."
        )
