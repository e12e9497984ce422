"""Exceptions raised by the rotation planner."""


class RotationError(Exception):
    """Base exception for rotation planning failures."""

    pass


class CharacterNotFoundError(RotationError):
    """Raised when the character is not registered to the user."""

    def __init__(self, user_id: str, character_id: int):
        self.user_id = user_id
        self.character_id = character_id
        super().__init__(f"Character {character_id} is not registered for user {user_id}")
