"""
Feature Generator
Generates Cucumber feature files and title suggestions from user stories
"""
import json
import logging
import re
from typing import List

from .exceptions import GenerationError
from .gherkin import count_scenarios
from .llm_client import LLMClient
from .prompts import Prompts

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r'```(gherkin)?')
TAG_BLOCK_PATTERN = re.compile(r'@\w+\s*\n(@\w+\s*\n)*')
FEATURE_BLANK_LINE_PATTERN = re.compile(r'Feature:([^\n]+)\n\n')


def build_feature_tag(title: str) -> str:
    """
    Build the single feature tag from a title.

    Non-word characters are dropped and the words are camel-cased,
    e.g. "User Login!" -> "@userLogin".
    """
    words = re.sub(r'[^\w\s]', '', title or '').split()
    parts = [
        word.lower() if i == 0 else word[0].upper() + word[1:]
        for i, word in enumerate(words)
    ]
    return "@" + "".join(parts)


def clean_generated_content(content: str, feature_tag: str) -> str:
    """Strip code fences, force the single feature tag and tighten the Feature header"""
    content = CODE_FENCE_PATTERN.sub('', content or '').strip()
    content = TAG_BLOCK_PATTERN.sub(f"{feature_tag}\n", content, count=1)
    content = FEATURE_BLANK_LINE_PATTERN.sub(r'Feature:\1\n', content)
    return content


class FeatureGenerator:
    """LLM-backed generation of Gherkin feature files"""

    def __init__(self, llm_client: LLMClient, max_tokens: int = 2000):
        self.llm_client = llm_client
        self.max_tokens = max_tokens

    def build_prompt(self, title: str, story: str, scenario_count: int, domain: str = "generic") -> str:
        return Prompts.get_feature_generation_template().format(
            title=title,
            story=story,
            domain=domain,
            scenario_count=scenario_count,
            remaining_count=max(scenario_count - 1, 0),
            feature_tag=build_feature_tag(title),
            domain_instruction=Prompts.get_domain_instruction(domain),
        )

    def generate_feature(self, title: str, story: str, scenario_count: int, domain: str = "generic") -> str:
        """
        Generate a feature file with exactly `scenario_count` scenarios.

        Args:
            title: Feature title
            story: User story the scenarios should cover
            scenario_count: Required number of scenarios
            domain: Domain used to specialise the scenarios (unknown values fall back to generic)

        Returns:
            Cleaned Gherkin text

        Raises:
            GenerationError: the LLM call failed or returned the wrong number of scenarios
        """
        domain = domain or "generic"
        logger.info(f"Generating feature '{title}' with {scenario_count} scenarios (domain={domain})")

        try:
            content = self.llm_client.generate_content(
                self.build_prompt(title, story, scenario_count, domain),
                system_prompt=Prompts.get_feature_generation_system_prompt(),
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(f"Feature generation failed: {e}")
            raise GenerationError(f"Failed to generate feature: {e}") from e

        content = clean_generated_content(content, build_feature_tag(title))

        actual_count = count_scenarios(content)
        if actual_count != scenario_count:
            logger.warning(f"Generated feature has {actual_count} scenarios, expected {scenario_count}")
            raise GenerationError(
                f"Failed to generate feature: Expected {scenario_count} scenarios, but found {actual_count}."
            )

        return content

    def suggest_titles(self, story: str) -> List[str]:
        """
        Suggest short feature titles for a story.

        Raises:
            GenerationError: the LLM call failed or returned unusable JSON
        """
        try:
            response = self.llm_client.generate_content_json(
                Prompts.get_title_suggestion_template().format(story=story),
                system_prompt=Prompts.get_title_suggestion_system_prompt(),
            )
            result = json.loads(response)
        except Exception as e:
            logger.error(f"Title suggestion failed: {e}")
            raise GenerationError(f"Failed to suggest title: {e}") from e

        titles = result.get("titles") if isinstance(result, dict) else None
        if not isinstance(titles, list):
            return []
        return [str(t).strip() for t in titles if str(t).strip()]
