"""Subscription registry — maps client subscriptions to store watches.

Learn: One registry per application (created in the lifespan), shared by
every socket. It owns two maps that are always updated together:

    key → Subscription       (holds the store's cancellation handle)
    client_id → ClientSession (holds the set of keys the client owns)

A session never touches a handle directly; it only knows keys. That
indirection is what lets disconnect_client() tear everything down in one
pass. Every live watch is reachable from exactly one key, and every key
from exactly one client.

Threading: all mutation happens on the event loop. Store callbacks are
delivered on the loop too (see store/base.py), so no locking is needed.

Keys are deterministic — `<client>/<collection>` or
`<client>/<collection>/<document>`, each segment percent-encoded — so a
client can always recompute the key for a target it subscribed to.
"""

import itertools
from dataclasses import dataclass, field
from urllib.parse import quote

import structlog

from microred.errors import ListenerFailure, UnknownClientError
from microred.realtime.channel import ClientChannel
from microred.realtime.messages import (
    Change,
    CollectionUpdate,
    DocumentUpdate,
    ErrorMessage,
)
from microred.store.base import (
    CancelWatch,
    DocumentChange,
    DocumentState,
    DocumentStore,
)

logger = structlog.get_logger()


def collection_key(client_id: str, collection_name: str) -> str:
    return f"{_segment(client_id)}/{_segment(collection_name)}"


def document_key(client_id: str, collection_name: str, document_id: str) -> str:
    return f"{collection_key(client_id, collection_name)}/{_segment(document_id)}"


def _segment(value: str) -> str:
    return quote(value, safe="")


def _validate_identifier(kind: str, value: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{kind} must be a non-empty string")
    if "/" in value:
        raise ValueError(f"{kind} must not contain '/': {value!r}")


@dataclass(frozen=True)
class Subscription:
    """One active watch. Immutable — only its cancel handle is ever invoked."""

    key: str
    client_id: str
    collection_name: str
    document_id: str | None
    cancel: CancelWatch
    watch_id: int

    @property
    def target(self) -> str:
        if self.document_id is None:
            return self.collection_name
        return f"{self.collection_name}/{self.document_id}"


@dataclass
class ClientSession:
    """One connected socket: where to send, and which keys it owns."""

    client_id: str
    channel: ClientChannel
    keys: set[str] = field(default_factory=set)


class SubscriptionRegistry:
    """Tracks per-client change-feed subscriptions against a DocumentStore."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self._subscriptions: dict[str, Subscription] = {}
        self._sessions: dict[str, ClientSession] = {}
        self._watch_ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._subscriptions)

    # ─── Sessions ───────────────────────────────────────

    def connect_client(self, client_id: str, channel: ClientChannel) -> ClientSession:
        """Start tracking a client. Reconnecting an id replaces its channel."""
        session = self._sessions.get(client_id)
        if session is None:
            session = ClientSession(client_id=client_id, channel=channel)
            self._sessions[client_id] = session
        else:
            session.channel = channel
        logger.info("realtime.client_connected", client_id=client_id)
        return session

    def disconnect_client(self, client_id: str) -> None:
        """Cancel every watch the client owns and forget the client.

        Idempotent: a second call (or a call for an unknown client) does nothing.
        """
        session = self._sessions.pop(client_id, None)
        if session is None:
            return

        for key in sorted(session.keys):
            subscription = self._subscriptions.pop(key, None)
            if subscription is not None:
                self._cancel(subscription)
        released = len(session.keys)
        session.keys.clear()
        logger.info(
            "realtime.client_disconnected",
            client_id=client_id,
            released=released,
        )

    def keys_for(self, client_id: str) -> frozenset[str]:
        session = self._sessions.get(client_id)
        return frozenset(session.keys) if session else frozenset()

    def clients(self) -> list[str]:
        return list(self._sessions)

    # ─── Subscribe ──────────────────────────────────────

    def subscribe_to_collection(self, client_id: str, collection_name: str) -> str:
        """Watch a whole collection; changes arrive as `collection_update`."""
        _validate_identifier("collection name", collection_name)
        session = self._session(client_id)
        key = collection_key(client_id, collection_name)
        watch_id = next(self._watch_ids)

        def on_change(changes: list[DocumentChange]) -> None:
            if not self._is_current(key, watch_id) or not changes:
                return
            session.channel.send(
                CollectionUpdate(
                    collection_name=collection_name,
                    changes=[Change(type=c.type, id=c.id, data=c.data) for c in changes],
                )
            )

        cancel = self.store.watch_collection(
            collection_name,
            on_change,
            self._error_handler(session, key, watch_id, collection_name),
        )
        self._register(
            session,
            Subscription(
                key=key,
                client_id=client_id,
                collection_name=collection_name,
                document_id=None,
                cancel=cancel,
                watch_id=watch_id,
            ),
        )
        return key

    def subscribe_to_document(
        self, client_id: str, collection_name: str, document_id: str
    ) -> str:
        """Watch one document; every change arrives as `document_update`."""
        _validate_identifier("collection name", collection_name)
        _validate_identifier("document id", document_id)
        session = self._session(client_id)
        key = document_key(client_id, collection_name, document_id)
        watch_id = next(self._watch_ids)

        def on_change(state: DocumentState) -> None:
            if not self._is_current(key, watch_id):
                return
            session.channel.send(
                DocumentUpdate(
                    collection_name=collection_name,
                    document_id=state.id,
                    exists=state.exists,
                    data=state.data if state.exists else None,
                )
            )

        cancel = self.store.watch_document(
            collection_name,
            document_id,
            on_change,
            self._error_handler(
                session, key, watch_id, f"{collection_name}/{document_id}"
            ),
        )
        self._register(
            session,
            Subscription(
                key=key,
                client_id=client_id,
                collection_name=collection_name,
                document_id=document_id,
                cancel=cancel,
                watch_id=watch_id,
            ),
        )
        return key

    # ─── Unsubscribe ────────────────────────────────────

    def unsubscribe(self, client_id: str, key: str) -> None:
        """Cancel one watch. Unknown keys, or keys owned by another client, are a no-op."""
        session = self._sessions.get(client_id)
        if session is None or key not in session.keys:
            logger.debug("realtime.unsubscribe_ignored", client_id=client_id, key=key)
            return

        session.keys.discard(key)
        subscription = self._subscriptions.pop(key, None)
        if subscription is not None:
            self._cancel(subscription)
        logger.info("realtime.unsubscribed", client_id=client_id, key=key)

    # ─── Internals ──────────────────────────────────────

    def _session(self, client_id: str) -> ClientSession:
        session = self._sessions.get(client_id)
        if session is None:
            raise UnknownClientError(f"Client {client_id!r} is not connected")
        return session

    def _register(self, session: ClientSession, subscription: Subscription) -> None:
        previous = self._subscriptions.get(subscription.key)
        if previous is not None:
            # Same client re-subscribing to the same target: drop the old watch
            self._cancel(previous)
            logger.info(
                "realtime.subscription_replaced",
                client_id=session.client_id,
                key=subscription.key,
            )

        self._subscriptions[subscription.key] = subscription
        session.keys.add(subscription.key)
        logger.info(
            "realtime.subscribed",
            client_id=session.client_id,
            key=subscription.key,
            target=subscription.target,
        )

    def _is_current(self, key: str, watch_id: int) -> bool:
        subscription = self._subscriptions.get(key)
        return subscription is not None and subscription.watch_id == watch_id

    def _error_handler(
        self, session: ClientSession, key: str, watch_id: int, target: str
    ):
        def on_error(error: Exception) -> None:
            # The subscription stays registered; the client decides whether to drop it.
            if not self._is_current(key, watch_id):
                return
            failure = ListenerFailure(target, str(error))
            logger.error(
                "realtime.listener_failed",
                client_id=session.client_id,
                key=key,
                error=str(error),
            )
            session.channel.send(ErrorMessage(message=str(failure)))

        return on_error

    @staticmethod
    def _cancel(subscription: Subscription) -> None:
        try:
            subscription.cancel()
        except Exception:
            logger.exception(
                "realtime.cancel_failed",
                client_id=subscription.client_id,
                key=subscription.key,
            )
