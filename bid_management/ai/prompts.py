"""Prompt templates for the AI-assist endpoints.

Structured prompts ask for a JSON object; the bid generation prompt returns
free text.
"""

ANALYZE_TENDER_SYSTEM = (
    "You are a tender analysis expert. Analyze how well a tender matches company capabilities "
    "and provide a score from 0-100 with detailed reasoning. Respond with JSON in this format: "
    '{"score": number, "reasons": string[], "recommendations": string[]}'
)

ANALYZE_TENDER_USER = """Tender: {tender_description}

Company Capabilities: {capabilities}"""


OPTIMIZE_BID_SYSTEM = (
    "You are a bid writing expert. Optimize the given bid content to better match tender requirements. "
    "Provide improved content and specific improvements made. Respond with JSON in this format: "
    '{"optimizedContent": string, "improvements": string[], "confidenceScore": number}'
)

OPTIMIZE_BID_USER = """Current Bid Content: {current_content}

Tender Requirements: {tender_requirements}"""


PRICING_SYSTEM = (
    "You are a pricing strategy expert for Indian public procurement. Analyze the tender and suggest "
    "optimal pricing in rupees. Consider market conditions and competitive positioning. Respond with "
    'JSON in this format: {"suggestedPrice": number, "reasoning": string, '
    '"competitiveAnalysis": string, "winProbability": number}'
)

PRICING_USER = """Tender: {tender_description}

Estimated Costs: {estimated_costs}

Market Data: {market_data}"""


RISK_SYSTEM = (
    "You are a risk assessment expert for tenders and bids. Analyze potential risks and provide "
    "mitigation strategies. Risk level should be 'low', 'medium', or 'high'. Respond with JSON in this "
    'format: {"riskLevel": string, "riskFactors": string[], "mitigationStrategies": string[], '
    '"riskScore": number}'
)

RISK_USER = """Tender: {tender_description}

Days until deadline: {days_until_deadline}

Tender value: {tender_value}"""


GENERATE_BID_SYSTEM = (
    "You are a professional bid writer. Create comprehensive bid content that addresses all tender "
    "requirements and showcases company capabilities effectively."
)

GENERATE_BID_USER = """Create a professional bid proposal for the following tender:

Tender: {tender_description}

Company Profile: {company_profile}

Requirements to address: {requirements}"""
