"""Real-time infrastructure — store change feeds → WebSocket.

Learn: Events flow in one direction:
1. Store listener fires (Firestore on_snapshot, or the memory store)
2. SubscriptionRegistry turns it into a message for the owning client
3. The client's QueueChannel hands it to the socket writer task

Clients choose what they receive by subscribing to collections or
single documents; the registry owns every underlying listener.
"""
