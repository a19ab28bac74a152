"""
Centralized Prompt Templates
All LLM prompts are defined here for better maintainability and consistency.

This module aggregates prompts from category-specific modules behind a
single Prompts class.
"""
from .generation import GenerationPrompts
from .analysis import AnalysisPrompts
from .system import SystemPrompts
from .utility import UtilityPrompts


class Prompts:
    """Centralized prompt templates organized by category"""
    
    # ==========================================
    # GENERATION PROMPTS
    # ==========================================
    
    @staticmethod
    def get_feature_generation_template() -> str:
        """Get the template for generating a feature file"""
        return GenerationPrompts.get_feature_generation_template()
    
    @staticmethod
    def get_domain_instruction(domain: str) -> str:
        """Get domain-specific generation guidance"""
        return GenerationPrompts.get_domain_instruction(domain)
    
    @staticmethod
    def get_title_suggestion_template() -> str:
        """Get the template for title suggestions"""
        return GenerationPrompts.get_title_suggestion_template()
    
    # ==========================================
    # ANALYSIS PROMPTS
    # ==========================================
    
    @staticmethod
    def get_complexity_analysis_template() -> str:
        """Get the template for complexity analysis"""
        return AnalysisPrompts.get_complexity_analysis_template()
    
    # ==========================================
    # SYSTEM PROMPTS
    # ==========================================
    
    @staticmethod
    def get_default_system_prompt() -> str:
        """Get default system prompt for LLM"""
        return SystemPrompts.get_default_system_prompt()
    
    @staticmethod
    def get_feature_generation_system_prompt() -> str:
        """Get system prompt for feature generation"""
        return SystemPrompts.get_feature_generation_system_prompt()
    
    @staticmethod
    def get_title_suggestion_system_prompt() -> str:
        """Get system prompt for title suggestions"""
        return SystemPrompts.get_title_suggestion_system_prompt()
    
    @staticmethod
    def get_complexity_analysis_system_prompt() -> str:
        """Get system prompt for complexity analysis"""
        return SystemPrompts.get_complexity_analysis_system_prompt()
    
    # ==========================================
    # UTILITY PROMPTS
    # ==========================================
    
    @staticmethod
    def get_json_response_instruction() -> str:
        """Get standard JSON response instruction"""
        return UtilityPrompts.get_json_response_instruction()
    
    @staticmethod
    def get_claude_json_response_instruction() -> str:
        """Get Claude-specific JSON response instruction (more forceful for prompt-based generation)"""
        return UtilityPrompts.get_claude_json_response_instruction()
