"""
Utility Prompts
Response-format instructions appended to JSON prompts (complexity reports, title suggestions).
"""


class UtilityPrompts:
    """Format instructions appended to other prompts"""

    @staticmethod
    def get_json_response_instruction() -> str:
        """Instruction for providers with a native JSON mode"""
        return "Respond with a single JSON object only."

    @staticmethod
    def get_claude_json_response_instruction() -> str:
        """Instruction for prompt-based JSON generation (no native JSON mode)"""
        return """Reply with one JSON object and nothing else:
- no markdown fences and no text before or after it
- keep the keys exactly as named above (for example "scenarios" or "titles")
- use plain numbers for scores, not strings"""
