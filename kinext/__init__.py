"""Kinext: multi-tenant CMS, CRM and careers backend on Firestore.

Every registered user gets an isolated Firestore database; requests are
routed to it through the tenant registry in the admin database.
"""

__version__ = "1.0.0"
