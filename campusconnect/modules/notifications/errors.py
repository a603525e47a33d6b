class ServiceError(Exception):
    """A storage or transport call to the data service failed"""


class DuplicateSubscriberError(ServiceError):
    """The email address is already on the waitlist"""

    def __init__(self, email):
        super().__init__(f"Subscriber already exists: {email}")
        self.email = email
