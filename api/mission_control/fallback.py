"""Sample news payload served when the news pipeline fails."""

from datetime import datetime, timezone

from .models import AggregatedNewsResponse, NewsItem


def sample_news(now: datetime | None = None) -> AggregatedNewsResponse:
    """Build the hardcoded example payload.

    Args:
        now: Timestamp given to every card (defaults to the current time)

    Returns:
        AggregatedNewsResponse with three cards per bucket
    """
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    def card(category: str, headline: str, score: float, viewers: str | None = None) -> NewsItem:
        return NewsItem(
            category=category,
            headline=headline,
            timestamp=timestamp,
            viral_score=score,
            viewers=viewers,
        )

    return AggregatedNewsResponse(
        global_=[
            card("BREAKING", "Quantum Supremacy: Global Banking Protocol Breach Detected", 9.8),
            card("POLITICS", "Mars Colony Charter Signed by 140 Nations", 7.2),
            card("WORLD", "Arctic Digital Infrastructure Hub Announced", 6.5),
        ],
        tech=[
            card("ECONOMY", "Kuala Lumpur Becomes Southeast Asia's Premier AI Hub", 8.5),
            card("TECH", "Penang Semiconductor Corridor Announces Next-Gen Neural Chips", 6.9),
            card("TECH", "OpenAI Releases GPT-5 with Multimodal Reasoning", 9.2),
        ],
        ai=[
            card(
                "LIVE STREAM",
                "NVIDIA CEO Unveils 'Project Blackwell' - The Last Human-Designed Architecture?",
                9.9,
                viewers="22.4K",
            ),
            card(
                "SYNTHETIC MEDIA",
                "The Rise of AI YouTubers: Why Real Humans are Losing the Algorithm War",
                8.1,
            ),
            card("AI", "Claude 4 Passes Medical Board Exam with 99.7% Accuracy", 9.4),
        ],
    )
