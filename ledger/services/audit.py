import logging
from typing import Optional, Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

from ledger.exceptions import InvariantViolation
from ledger.models import AuditEvent
from ledger.services.ledger import lock_head

logger = logging.getLogger(__name__)

EVENTS_GROUP = 'ledger.events'


def format_event(event: AuditEvent) -> dict:
    return {
        'sequence': event.sequence,
        'kind': event.kind,
        'actor': event.actor,
        'subject': event.subject,
        'payload': event.payload,
        'createdAt': event.created_at.isoformat() if event.created_at else None,
    }


def broadcast_event(event: AuditEvent) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    async_to_sync(channel_layer.group_send)(EVENTS_GROUP, {'type': 'ledger.event', 'event': format_event(event)})


def log_event(*, kind: str, actor: str, subject: Optional[str] = None, payload: Optional[Dict[str, Any]] = None) -> AuditEvent:
    """Append an event for the mutation in progress.

    Must be called inside a serialized mutation; the event shares its
    transaction and is broadcast only once that transaction commits.
    """
    if not transaction.get_connection().in_atomic_block:
        raise InvariantViolation('audit events can only be written inside a ledger mutation')
    head = lock_head()
    head.sequence += 1
    head.save(update_fields=['sequence', 'updated_at'])
    event = AuditEvent.objects.create(
        sequence=head.sequence,
        kind=kind,
        actor=actor,
        subject=subject or '',
        payload=payload or {},
    )
    transaction.on_commit(lambda: broadcast_event(event), robust=True)
    logger.info('ledger #%s %s actor=%s subject=%s', event.sequence, kind, actor, event.subject or '-')
    return event
