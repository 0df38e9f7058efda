from __future__ import annotations

from typing import Optional, Protocol

from .model import Gym


class GymRepository(Protocol):
    def get_by_id(self, gym_id: str) -> Optional[Gym]:
        raise NotImplementedError
