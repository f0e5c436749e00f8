"""Friendchat - friends, direct messages and live delivery over FastAPI."""
