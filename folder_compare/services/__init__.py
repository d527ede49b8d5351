"""Supporting services: content hashing and settings persistence."""
