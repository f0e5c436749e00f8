"""
DTOs - Data Transfer Objects

DTOs for transferring data between layers:
- user.py    → UserDTO
- message.py → MessageDTO, AttachmentDTO

Note: These are different from domain entities.
DTOs are for API input/output (and live-push payloads), entities are for
business logic.
"""

from friendchat.application.dto.user import UserDTO
from friendchat.application.dto.message import MessageDTO, AttachmentDTO

__all__ = [
    "UserDTO",
    "MessageDTO",
    "AttachmentDTO",
]
