"""
CampusConnect
=============

A "coming soon" landing page with an email waitlist, plus an admin
dashboard for broadcasting update and launch emails to subscribers.

Usage:
    from flask import Flask
    from campusconnect import CampusConnect

    app = Flask(__name__)
    CampusConnect(app)
"""

__version__ = '0.1.0'

from .framework import CampusConnect

__all__ = ['CampusConnect']
