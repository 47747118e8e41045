"""Collaborators built on the document store: auth, chat, billing, voice, email, analytics, knowledge."""
