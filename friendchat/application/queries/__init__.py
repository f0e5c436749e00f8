"""
QUERIES - Read operations (CQRS)

Queries retrieve data without modifying state. Each query has:
- Query class: Parameters for the read
- Handler class: Executes the read

Subfolders:
- chat/    → get_conversation
- friends/ → list_friends, search_users
"""
