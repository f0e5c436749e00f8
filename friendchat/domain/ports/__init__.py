"""
PORTS - Interfaces that infrastructure implements

A "port" is an abstract interface that defines WHAT the domain needs,
without specifying HOW it's done.

Subfolders:
- repositories/  → Data persistence interfaces (users/friend graph, messages)
- (root files)   → Other external service interfaces
  - attachment_uploader.py → upload raw payload, get a stable URL back
  - presence.py            → online user → live session lookup
"""
