import hashlib
import json
import logging
from typing import Optional, Dict, Any

from ...utils import utcnow
from ...application.ports.audit_logger import AuditLogger


class StdAuditLogger(AuditLogger):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def log(self, action: str, actor_id: str, target_id: Optional[str] = None, email: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        entry = {
            "timestamp": utcnow().isoformat(),
            "action": action,
            "actor_id": actor_id,
            "target_id": target_id,
            "email_hash": hashlib.sha256(email.encode()).hexdigest() if email else None,
            "success": success,
            "details": details or {},
        }
        self._logger.info(f"AUDIT: {json.dumps(entry)}")
