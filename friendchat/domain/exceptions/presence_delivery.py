"""
PresenceDeliveryError - A live push to an online session failed.

Never surfaced to the sender: the dispatcher absorbs it, the receiver can still
pull the message from conversation history.
"""


class PresenceDeliveryError(Exception):
    def __init__(self, message: str = "Live delivery failed."):
        super().__init__(message)
