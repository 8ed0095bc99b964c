"""Conversation workflow definitions (JSONL) and their loader."""
