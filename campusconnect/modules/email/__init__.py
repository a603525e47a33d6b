"""
Email Module
============

Provides email sending functionality with Resend, SES and SMTP providers.
Includes templates for the welcome, update and launch emails.
"""

from .email_service import EmailService, email_service, is_valid_email

__all__ = ['EmailService', 'email_service', 'is_valid_email']
