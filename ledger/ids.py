"""Erzeugung opaker, clientseitiger IDs."""

import uuid

ID_LENGTH = 12


def new_id() -> str:
    """Zufällige hexadezimale ID fester Länge (Kollisionen vernachlässigbar)."""
    return uuid.uuid4().hex[:ID_LENGTH]
