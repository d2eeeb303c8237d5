"""
Brainstorming ideas: CRUD over stored notes and template-based idea
generation for the idea board.
"""
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from sellsight.db.repository import ProductRepository
from sellsight.schemas.idea import Idea, IdeaCreate, IdeaPrompt, IdeaTemplate, IdeaUpdate

logger = logging.getLogger(__name__)


class UnknownPromptError(ValueError):
    pass


IDEA_PROMPTS: List[IdeaPrompt] = [
    IdeaPrompt(id="market-gaps", label="Market Gaps", description="Find underserved market opportunities"),
    IdeaPrompt(id="user-pain", label="User Pain Points", description="Address customer frustrations"),
    IdeaPrompt(id="automation", label="Automation", description="Automate manual processes"),
    IdeaPrompt(id="trends", label="Emerging Trends", description="Capitalize on new trends"),
    IdeaPrompt(id="monetization", label="Revenue Streams", description="New ways to generate income"),
    IdeaPrompt(id="expansion", label="Market Expansion", description="Enter new markets or regions"),
]


def _template(title, description, category, tags, inspiration) -> IdeaTemplate:
    return IdeaTemplate(
        title=title, description=description, category=category, tags=tags, inspiration=inspiration
    )


IDEA_TEMPLATES: Dict[str, List[IdeaTemplate]] = {
    "market-gaps": [
        _template(
            "Real-time Inventory Alerts",
            "Notify sellers when competitor inventory drops below threshold, indicating potential demand surge opportunities.",
            "New Feature", ["Alerts", "Inventory", "Competition"],
            "Market gap in real-time inventory monitoring",
        ),
        _template(
            "Seasonal Demand Predictor",
            "Model that predicts seasonal demand patterns for different product categories based on historical data.",
            "Feature Enhancement", ["AI", "Seasonality", "Prediction"],
            "Gap in seasonal planning tools",
        ),
        _template(
            "Micro-Niche Discovery Engine",
            "Identify profitable micro-niches by analyzing low-competition, high-demand product combinations.",
            "New Feature", ["Niche", "Discovery", "Analytics"],
            "Underserved niche identification market",
        ),
    ],
    "user-pain": [
        _template(
            "One-Click Competitor Analysis",
            "Simplify competitor research with automated reports comparing pricing, features, and market positioning.",
            "UI/UX Improvement", ["Automation", "Competition", "Reports"],
            "Users struggle with manual competitor research",
        ),
        _template(
            "Smart Price Optimization Wizard",
            "Guided workflow that suggests optimal pricing based on competition, demand, and profit margins.",
            "New Feature", ["Pricing", "Optimization", "Wizard"],
            "Pricing decisions are complex and time-consuming",
        ),
        _template(
            "Visual Trend Dashboard",
            "Replace complex data tables with intuitive visual representations of market trends and opportunities.",
            "UI/UX Improvement", ["Visualization", "Dashboard", "UX"],
            "Data overload frustrates users",
        ),
    ],
    "automation": [
        _template(
            "Auto-Generated Market Reports",
            "Automatically generate weekly market analysis reports with key insights and recommendations.",
            "Feature Enhancement", ["Automation", "Reports", "AI"],
            "Manual report creation is time-consuming",
        ),
        _template(
            "Smart Alert System",
            "Notifications that learn user preferences and only alert on relevant market changes.",
            "New Feature", ["AI", "Alerts", "Personalization"],
            "Reduce notification fatigue through automation",
        ),
        _template(
            "Automated Competitor Tracking",
            "Monitor specific competitors with daily updates on their pricing and product changes.",
            "Feature Enhancement", ["Automation", "Competition", "Monitoring"],
            "Manual competitor tracking is inefficient",
        ),
    ],
    "trends": [
        _template(
            "Social Media Trend Integration",
            "Incorporate social media trending topics and hashtags to predict emerging product demand.",
            "Integration", ["Social Media", "Trends", "Prediction"],
            "Social trends drive product demand",
        ),
        _template(
            "Sustainability Score Tracker",
            "Track and score products based on sustainability metrics as eco-consciousness grows.",
            "New Feature", ["Sustainability", "ESG", "Scoring"],
            "Growing trend toward sustainable products",
        ),
        _template(
            "Voice Commerce Analytics",
            "Analyze voice search patterns and optimize product listings for voice commerce platforms.",
            "New Feature", ["Voice", "SEO", "Analytics"],
            "Rise of voice-activated shopping",
        ),
    ],
    "monetization": [
        _template(
            "Premium Analytics Tier",
            "Advanced analytics including predictive modeling and custom report generation for enterprise users.",
            "New Feature", ["Premium", "Analytics", "Enterprise"],
            "Monetize advanced features",
        ),
        _template(
            "API Access Marketplace",
            "Offer paid API access to our market data for third-party developers and businesses.",
            "New Feature", ["API", "Marketplace", "B2B"],
            "Data as a service revenue model",
        ),
        _template(
            "Consultation Services",
            "Offer expert market analysis consultation services based on platform insights.",
            "New Feature", ["Services", "Consultation", "Expert"],
            "Monetize expertise and insights",
        ),
    ],
    "expansion": [
        _template(
            "Multi-Platform Integration",
            "Expand beyond current platforms to include international and regional marketplaces.",
            "Integration", ["International", "Platforms", "Expansion"],
            "Global market expansion opportunity",
        ),
        _template(
            "B2B Wholesale Analytics",
            "Specialized analytics for wholesale markets and B2B transactions.",
            "New Feature", ["B2B", "Wholesale", "Analytics"],
            "Untapped B2B market segment",
        ),
        _template(
            "Mobile App Companion",
            "Native mobile app for on-the-go market monitoring and quick decision making.",
            "New Feature", ["Mobile", "App", "Accessibility"],
            "Mobile-first market expansion",
        ),
    ],
}


def generate_ideas(prompt_ids: Sequence[str], rng: Optional[random.Random] = None) -> List[IdeaTemplate]:
    """
    Pick one or two distinct templates at random for each selected prompt.

    Raises:
        UnknownPromptError: if any prompt id is not a known prompt
    """
    unknown = [prompt_id for prompt_id in prompt_ids if prompt_id not in IDEA_TEMPLATES]
    if unknown:
        raise UnknownPromptError(f"Unknown idea prompts: {', '.join(unknown)}")

    rng = rng or random.Random()
    ideas: List[IdeaTemplate] = []
    for prompt_id in dict.fromkeys(prompt_ids):
        templates = IDEA_TEMPLATES[prompt_id]
        ideas.extend(rng.sample(templates, rng.randint(1, 2)))
    return ideas


def _clean_tags(tags: Sequence[str]) -> List[str]:
    return [tag.strip() for tag in tags if tag and tag.strip()]


def create_idea(repo: ProductRepository, payload: IdeaCreate) -> Idea:
    idea = Idea(
        id=uuid.uuid4().hex,
        title=payload.title,
        description=payload.description,
        category=payload.category,
        priority=payload.priority,
        status="new",
        created_at=datetime.now(timezone.utc),
        tags=_clean_tags(payload.tags),
    )
    logger.info(f"Creating idea {idea.id}: {idea.title}")
    return repo.save_idea(idea)


def update_idea(repo: ProductRepository, idea_id: str, payload: IdeaUpdate) -> Optional[Idea]:
    """Apply the provided fields; id and created_at never change. None if the idea is unknown."""
    current = repo.get_idea(idea_id)
    if current is None:
        return None

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "tags" in changes:
        changes["tags"] = _clean_tags(changes["tags"])
    updated = current.model_copy(update=changes)
    return repo.save_idea(updated)
