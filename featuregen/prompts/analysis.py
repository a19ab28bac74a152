"""
Analysis Prompts
Prompts for scoring the test-automation complexity of feature files.
"""


class AnalysisPrompts:
    """Prompts for analysis operations"""
    
    @staticmethod
    def get_complexity_analysis_template() -> str:
        """Get the template for feature complexity analysis"""
        return """You are an expert in Cucumber BDD and test architecture. Analyze this feature file and return a JSON object with:

- overallComplexity: a number from 1 to 10 (how hard this feature is to test)
- scenarios: an array with one entry per scenario, in the order they appear, each with:
  - name: the scenario title exactly as written
  - complexity: 1-10
  - factors: {{
      stepCount: 1-10,
      dataDependencies: 1-10,
      conditionalLogic: 1-10,
      technicalDifficulty: 1-10
    }}
  - explanation: string explaining the complexity
- recommendations: array of actionable insights for improving testability

Respond ONLY with valid JSON.

Example JSON format:
{{
  "overallComplexity": 6,
  "scenarios": [
    {{
      "name": "Login with valid credentials",
      "complexity": 4,
      "factors": {{
        "stepCount": 3,
        "dataDependencies": 2,
        "conditionalLogic": 1,
        "technicalDifficulty": 2
      }},
      "explanation": "Standard login flow with simple validation."
    }}
  ],
  "recommendations": [
    "Mock external dependencies for isolation.",
    "Reduce redundant steps to improve speed."
  ]
}}

Feature content:
{content}"""
