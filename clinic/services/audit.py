import logging
from typing import Any, Dict, Optional

from django.db import transaction

from clinic.models import AuditEvent

logger = logging.getLogger(__name__)


def log_action(*, actor=None, action: str, object_type: Optional[str] = None, object_id=None,
               detail: Optional[Dict[str, Any]] = None) -> Optional[AuditEvent]:
    """Record an audit row.  Never raises; a failed write is only logged.

    The insert runs in its own savepoint so a failure cannot poison an
    enclosing transaction.
    """
    try:
        with transaction.atomic():
            return AuditEvent.objects.create(
                actor_role=getattr(actor, 'role', '') or '',
                actor_id=str(actor.id) if getattr(actor, 'id', None) is not None else None,
                action=action,
                object_type=object_type,
                object_id=str(object_id) if object_id is not None else None,
                detail=detail or {},
            )
    except Exception:
        logger.exception('failed to write audit event %s', action)
        return None
