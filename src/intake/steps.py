"""Wizard step catalogue."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List


@dataclass(frozen=True)
class StepDefinition:
    number: int
    title: str
    description: str
    folder: str
    skippable: bool = False

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


STEPS: List[StepDefinition] = [
    StepDefinition(
        1, "Company and contact person",
        "The person we coordinate with and the company details shown in the site footer",
        "01_company_info",
    ),
    StepDefinition(
        2, "Hosting and domain",
        "Hosting and domain accounts needed to build and publish the site",
        "02_hosting_domain",
    ),
    StepDefinition(
        3, "Mail settings",
        "DNS mail records, only when a company mail server is used instead of a portal mailbox",
        "03_mail_settings",
        skippable=True,
    ),
    StepDefinition(
        4, "SEO setup",
        "Search console accounts and site metadata for search engine registration",
        "04_seo",
    ),
    StepDefinition(
        5, "Design references",
        "Reference sites that show the intended look and feel",
        "05_design_references",
    ),
    StepDefinition(
        6, "Sitemap",
        "Primary and secondary menu structure",
        "06_sitemap",
    ),
    StepDefinition(
        7, "Site assets",
        "Logo and content files for each menu",
        "07_site_assets",
        skippable=True,
    ),
]

STEP_BY_NUMBER: Dict[int, StepDefinition] = {s.number: s for s in STEPS}
STEP_FOLDERS: List[str] = [s.folder for s in STEPS]


def get_step(number: int) -> StepDefinition:
    """Return the step definition; ``KeyError`` for numbers outside 1..7."""
    return STEP_BY_NUMBER[number]


def step_title(number: int) -> str:
    return STEP_BY_NUMBER[number].title
