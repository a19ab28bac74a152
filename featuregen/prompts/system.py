"""
System Prompts
System prompts for the different LLM operations.
"""


class SystemPrompts:
    """System prompts for LLM providers"""
    
    @staticmethod
    def get_default_system_prompt() -> str:
        """Get default system prompt for LLM"""
        return "You are an expert in Cucumber BDD who writes clear, business-readable Gherkin feature files."
    
    @staticmethod
    def get_feature_generation_system_prompt() -> str:
        """Get system prompt for feature file generation"""
        return ("You are an expert in Cucumber BDD. Generate a valid feature file using the user's title, story, "
                "and domain context. The output must have exactly one tag, a Background, and the required number of scenarios.")
    
    @staticmethod
    def get_title_suggestion_system_prompt() -> str:
        """Get system prompt for feature title suggestions"""
        return "You are a Cucumber BDD title expert. Suggest short, business-readable feature titles (max 5 words)."
    
    @staticmethod
    def get_complexity_analysis_system_prompt() -> str:
        """Get system prompt for complexity analysis"""
        return "You analyze Cucumber features for automation complexity, performance risk, and technical challenges."
