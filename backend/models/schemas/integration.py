"""Target-network integration classification for a project."""

from typing import Literal

from pydantic import BaseModel


class IntegrationSignal(BaseModel):
    """Keyword evidence that a project integrates with the target network.

    Always present; ``network_type`` is "none" when nothing matched.
    """
    network_type: Literal["none", "general", "testnet", "mainnet"] = "none"
    bonus_score: int = 0
    matched_keywords: list[str] = []

    @property
    def has_indicators(self) -> bool:
        return self.network_type != "none"
