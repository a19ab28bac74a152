"""
Generation Prompts
Prompts for generating Gherkin feature files and suggesting feature titles.
"""
from typing import Dict


class GenerationPrompts:
    """Prompts for feature generation"""
    
    DOMAIN_INSTRUCTIONS: Dict[str, str] = {
        "agentic": "Focus on autonomous agent behavior, task chaining, planning, memory recall, and action execution across multi-step workflows.",
        "ai": "Focus on AI model validation, hallucination detection, bias/fairness testing, and explainability. Include prompt handling and evaluation scenarios.",
        "automotive": "Emphasize safety-critical systems, diagnostics, sensor data interpretation, and autonomous driving scenarios. Include CAN bus or ECU references if applicable.",
        "biotech": "Include scenarios related to genomic analysis, lab data pipelines, machine learning in drug discovery, and bioinformatics validation steps.",
        "crypto": "Include smart contract interactions, wallet transactions, multi-sig approval, and blockchain confirmations. Use web3-style flows and secure access patterns.",
        "ecommerce": "Include checkout flows, cart management, product filtering, promotions, and order lifecycle. Test across desktop and mobile.",
        "finance": "Focus on transactions, authentication, fraud detection, and data integrity. Use secure access patterns and compliance terms (e.g. PCI, AML).",
        "gaming": "Test multiplayer interactions, leaderboard updates, in-game purchases, user sessions, and state synchronization.",
        "gdpr": "Validate user consent, data deletion requests, access logging, and cross-border data restrictions. Include legal justification handling.",
        "generic": "Use user-centered behavior with a focus on feature functionality and outcomes. Avoid implementation details or internal actions.",
        "healthcare": "Include scenarios relevant to HIPAA, EHR workflows, patient safety, and access controls. Use realistic healthcare data flows.",
        "infrastructure": "Focus on client-server architecture, network protocols (HTTP, TCP, DNS), environment configuration, request tracing, and resiliency under latency/failure conditions.",
        "insurance": "Include quote generation, claim submission, fraud rules, and risk analysis workflows. Address underwriting decision logic.",
        "llmops": "Focus on monitoring LLMs in production, drift detection, version control, prompt evaluation, and user feedback loop integration.",
        "medtech": "Include Class II/III device safety validation, regulatory workflows, device-to-cloud syncing, and audit trail scenarios.",
        "performance": "Emphasize load scenarios, latency checks, scaling behavior, and backend throughput. Consider APM or telemetry-based validations.",
        "rag": "Include retrieval validation, passage relevance checks, hallucination reduction, and LLM+vector database integration (e.g. Weaviate, Pinecone).",
        "salesforce": "Center around CRM flows: updating leads, managing cases, triggering workflows, and AI (Einstein) suggestions.",
        "security": "Test authentication, RBAC, OWASP Top 10, privilege escalation attempts, and session timeout behavior.",
        "soc": "Test log ingestion, alert routing, playbook automation, SIEM triggers, and escalation thresholds. Include compliance mapping.",
        "sox": "Include access control validation, segregation of duties, audit log immutability, financial reporting checks, and change control approvals.",
    }
    
    @staticmethod
    def get_domain_instruction(domain: str) -> str:
        """Get domain-specific guidance, falling back to generic"""
        instructions = GenerationPrompts.DOMAIN_INSTRUCTIONS
        return instructions.get((domain or "generic").lower(), instructions["generic"])
    
    @staticmethod
    def get_feature_generation_template() -> str:
        """Get the template for generating a Cucumber feature file"""
        return """You are a domain-aware expert in writing Cucumber BDD feature files.

Feature Title: {title}
Feature Story: {story}
Domain: {domain}

Write a Cucumber feature with:
- EXACTLY {scenario_count} unique scenarios
- One reusable Background section
- Given/When/Then format
- ONLY one tag: {feature_tag}
- Domain instructions: {domain_instruction}
- Output ONLY valid Gherkin

Make sure:
- Steps in each Scenario start with "And" if there is a Background
- Avoid repeating "Given" if a Background is present

Example format:
{feature_tag}
Feature: {title}
As a user, I want to interact with this feature
So that I can achieve the expected outcome

Background:
  Given I am logged in

Scenario: First example
  And I navigate to the dashboard
  When I perform an action
  Then I see a result

[CONTINUE WITH {remaining_count} MORE SCENARIOS]"""
    
    @staticmethod
    def get_title_suggestion_template() -> str:
        """Get the template for feature title suggestions"""
        return """Story: {story}
Return 3 titles as a JSON object: {{"titles": ["<title 1>", "<title 2>", "<title 3>"]}}"""
