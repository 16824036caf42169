SYSTEM_ROLE = "You are a startup strategy analyst who evaluates business ideas for founders and investors."

ANALYSIS_PROMPTS = {
    "summary": "Provide a brief 2-3 sentence summary of this startup idea: {context}",

    "summary_research": (
        "Provide a brief 2-3 sentence summary of this startup idea, incorporating insights "
        "from the relevant research papers provided: {context}"
    ),

    "evaluation": """Provide a comprehensive evaluation of this startup idea in Markdown.
Structure the answer under exactly these four headings:
## Market Potential
## Competitive Advantages
## Key Challenges
## Implementation Considerations

Idea: {context}""",

    "evaluation_research": """Provide a comprehensive evaluation of this startup idea in Markdown.
Pay special attention to how the provided research papers support or challenge the idea's viability.
Structure the answer under exactly these four headings:
## Market Potential
## Competitive Advantages
## Key Challenges
## Implementation Considerations

Idea: {context}""",

    "pros_cons": "Analyze this startup idea and provide 4-6 key pros and 4-6 key cons: {context}",

    "pros_cons_research": (
        "Analyze this startup idea and provide 4-6 key pros and 4-6 key cons. Consider how the "
        "research papers provided support or challenge different aspects: {context}"
    ),

    "swot": """Analyze this startup idea using the SWOT framework. Identify:
- Strengths: Internal positive factors
- Weaknesses: Internal negative factors
- Opportunities: External positive factors
- Threats: External negative factors

Provide 3-5 specific points for each category.

Idea: {context}""",

    "swot_research": """Analyze this startup idea using the SWOT framework. Identify:
- Strengths: Internal positive factors
- Weaknesses: Internal negative factors
- Opportunities: External positive factors
- Threats: External negative factors

Provide 3-5 specific points for each category.

When analyzing, pay special attention to how the provided research papers inform each aspect of the SWOT analysis.

Idea: {context}""",

    "bcg": """Analyze this startup idea using the BCG Matrix. Determine:
- Market growth rate (high/low)
- Relative market share (high/low)
- Category classification (star, cash-cow, question-mark or dog)
- Reasoning for the classification

Provide numerical estimates where possible.

Idea: {context}""",

    "business_model": """Create a Business Model Canvas for this startup idea. Define:
- Key Partners: Who are the key partners and suppliers?
- Key Activities: What key activities does the value proposition require?
- Key Resources: What key resources does the value proposition require?
- Value Propositions: What value do we deliver to the customer?
- Customer Relationships: What type of relationship does each customer segment expect?
- Channels: Through which channels do our customer segments want to be reached?
- Customer Segments: For whom are we creating value?
- Cost Structure: What are the most important costs inherent in our business model?
- Revenue Streams: For what value are our customers really willing to pay?

Idea: {context}""",

    "metrics": """Evaluate this startup idea across four key metrics (scale 1-10):
- Desirability: Does this create real value for customers/users?
- Viability: Does this have potential to be financially sustainable?
- Feasibility: Is this technically and operationally feasible?
- Sustainability: Does this create positive long-term impact?

Idea: {context}""",

    "recommendations": """Based on this startup idea analysis, provide:
- 5 potential startup names
- Brand wheel (mission, vision, 3-5 brand values, 3-5 personality traits)
- Elevator pitch (30-second version)
- 5-step action plan for next 100 days
- 3-5 key improvements or alternatives to consider

Idea: {context}""",
}

# Steps whose wording changes when research papers are attached
RESEARCH_AWARE_STEPS = {"summary", "evaluation", "pros_cons", "swot"}


def build_prompt(step: str, context: str, has_research: bool = False) -> str:
    key = f"{step}_research" if has_research and step in RESEARCH_AWARE_STEPS else step
    return ANALYSIS_PROMPTS[key].format(context=context)
