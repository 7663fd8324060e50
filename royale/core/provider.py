"""
Position/health provider interface.

The host owns where participants are and how much health they have. The
engine reads positions for zone checks and routes damage through here.
"""

from abc import ABC, abstractmethod

from .participant import Participant, Position


class ParticipantProvider(ABC):
    """Interface to the host's view of participant bodies."""

    @abstractmethod
    def get_position(self, participant: Participant) -> Position:
        pass

    @abstractmethod
    def get_health(self, participant: Participant) -> float:
        pass

    @abstractmethod
    def apply_damage(self, participant: Participant, amount: float) -> float:
        """
        Apply damage and return the participant's remaining health.
        """
        pass


class LocalParticipantProvider(ParticipantProvider):
    """Provider backed by the fields of the Participant records themselves."""

    def get_position(self, participant: Participant) -> Position:
        return participant.position

    def get_health(self, participant: Participant) -> float:
        return participant.health

    def apply_damage(self, participant: Participant, amount: float) -> float:
        participant.health = max(0.0, participant.health - amount)
        return participant.health

    def move(self, participant: Participant, position: Position) -> None:
        participant.position = position
