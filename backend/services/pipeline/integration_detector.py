"""Base network integration detection by keyword tiers.

Tiers are evaluated in order; the first tier with any keyword present in the
project's text decides the classification and bonus.
"""

from models.schemas.integration import IntegrationSignal
from models.schemas.project import Project

# (network_type, keywords, bonus), highest priority first
INTEGRATION_TIERS: list[tuple[str, tuple[str, ...], int]] = [
    (
        "mainnet",
        (
            "base.org", "basescan.org", "base mainnet", "base network",
            "chain id 8453", "chainid: 8453", "base-mainnet", "8453",
        ),
        8,
    ),
    (
        "testnet",
        (
            "base sepolia", "base testnet", "base goerli", "sepolia.basescan.org",
            "chain id 84532", "chainid: 84532", "base-sepolia", "84532",
        ),
        5,
    ),
    (
        "general",
        ("base", "coinbase", "smart wallet", "onchainkit", "basename"),
        3,
    ),
]


def _project_text(project: Project) -> str:
    return f"{project.description_text} {project.tagline} {project.links}".lower()


def detect_integration(project: Project) -> IntegrationSignal:
    text = _project_text(project)
    for network_type, keywords, bonus in INTEGRATION_TIERS:
        matched = [kw for kw in keywords if kw in text]
        if matched:
            return IntegrationSignal(
                network_type=network_type,
                bonus_score=bonus,
                matched_keywords=matched,
            )
    return IntegrationSignal()
