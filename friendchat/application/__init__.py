"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → Write operations (CQRS): send_message, add_friend
- queries/   → Read operations (CQRS): get_conversation, list_friends, search_users
- dto/       → Data Transfer Objects
- common/    → Shared interfaces (Command, Query base classes)

Rules:
- Depends on Domain layer only
- No HTTP/framework code here
- Coordinates entities, repositories, external services
"""
