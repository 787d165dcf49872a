"""Microred — backend for the collaborator / microentrepreneur network.

REST resources for collaborators, microentrepreneurs, referrals,
incentives, zones, routes and administrators stored in Firestore,
plus a WebSocket channel that streams live collection and document
changes to connected clients.
"""

__version__ = "0.1.0"
