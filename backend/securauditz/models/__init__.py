from .base import Base
from .framework import Framework, Control
from .audit import Audit, AuditResponse

__all__ = [
    "Base",
    "Framework", "Control",
    "Audit", "AuditResponse",
]
