"""Messagely — person-to-person messaging service.

Users register, log in with a bearer token, and send each other
directed text messages with read-tracking.
"""

__version__ = "0.1.0"
