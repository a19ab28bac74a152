"""
Gherkin Helpers
Scenario heading extraction and small text utilities for Cucumber feature files
"""
import re
from typing import List, Optional

# Keyword must open the line (after indentation); "Scenario Outline" is tried first
SCENARIO_HEADING_PATTERN = re.compile(r'^\s*Scenario(?: Outline)?:(.*)$')


def extract_scenario_titles(text: Optional[str]) -> List[str]:
    """
    Return the titles of all Scenario / Scenario Outline headings, in order.

    A line counts as a heading only when, after its leading whitespace, it
    starts with the literal keyword. Keywords appearing mid-line (for example
    inside a quoted step argument) are ignored.

    Args:
        text: Gherkin document, or None

    Returns:
        Ordered list of trimmed titles (empty when nothing matches)
    """
    if not text:
        return []

    titles = []
    for line in text.splitlines():
        match = SCENARIO_HEADING_PATTERN.match(line)
        if not match:
            continue
        title = match.group(1).strip()
        if title:
            titles.append(title)
    return titles


def count_scenarios(text: Optional[str]) -> int:
    """Count scenario headings in a Gherkin document"""
    return len(extract_scenario_titles(text))
