"""
CampusConnect Modules
=====================

Flask blueprint modules and the services behind them.
"""

__all__ = ['waitlist', 'dashboard', 'notifications', 'email']
