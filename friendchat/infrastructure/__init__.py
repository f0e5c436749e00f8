"""
Infrastructure Layer - Technical implementations of domain ports.

This layer contains:
- persistence/: MongoDB implementations (motor repositories)
- cache/: Redis caching implementations (CachedMessageRepository)
- storage/: Attachment uploaders (local disk, Cloudinary)
- realtime/: Presence registry over WebSocket sessions
"""
