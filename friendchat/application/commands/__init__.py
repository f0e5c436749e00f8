"""
COMMANDS - Write operations (CQRS)

Subfolders:
- chat/    → send_message (persist + live push)
- friends/ → add_friend (bidirectional link)
"""
