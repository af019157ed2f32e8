"""Messages revealed to the traveler as the wizard advances."""

from app.schemas.accommodation import Accommodation
from app.schemas.destination import CanonicalDestination
from app.schemas.travel import AIRecommendations, AIResponse, TravelContext

# Canned destination advice, keyed by lower-cased destination name
_DESTINATION_ADVICE: dict[str, AIResponse] = {
    "paris": AIResponse(
        suggestions=[
            "Visit the Eiffel Tower at sunset for the best views",
            "Explore the Louvre Museum (book tickets in advance)",
            "Take a Seine River cruise",
            "Visit Notre-Dame Cathedral",
            "Walk through Montmartre",
        ],
        recommendations=AIRecommendations(
            accommodations=[
                "Hotel in Le Marais district",
                "Boutique hotel near Champs-Élysées",
                "Apartment in Saint-Germain-des-Prés",
            ],
            activities=[
                "Wine tasting in Montmartre",
                "Cooking class in a local kitchen",
                "Photography tour of Paris",
            ],
            transportation=[
                "Metro pass for unlimited travel",
                "Bicycle rental for city exploration",
                "Airport transfer service",
            ],
        ),
        next_step="Select your preferred accommodation from the recommendations above.",
    ),
    "tokyo": AIResponse(
        suggestions=[
            "Visit Senso-ji Temple in Asakusa",
            "Explore Shibuya Crossing",
            "Shop in Ginza district",
            "Visit Tokyo Skytree",
            "Experience Tsukiji Outer Market",
        ],
        recommendations=AIRecommendations(
            accommodations=["Hotel in Shinjuku", "Ryokan in Asakusa", "Apartment in Shibuya"],
            activities=["Sushi making class", "Tea ceremony experience", "Robot Restaurant show"],
            transportation=["JR Pass for city travel", "PASMO card for public transport", "Airport limousine bus"],
        ),
        next_step="Select your preferred accommodation from the recommendations above.",
    ),
}

_GENERAL_ADVICE = AIResponse(
    suggestions=[
        "Research local customs and etiquette",
        "Check visa requirements",
        "Get travel insurance",
        "Download offline maps",
        "Learn basic local phrases",
    ],
    recommendations=AIRecommendations(
        accommodations=[
            "Book accommodations in advance",
            "Consider location and accessibility",
            "Read recent reviews",
        ],
        activities=[
            "Plan major activities in advance",
            "Leave room for spontaneous exploration",
            "Check local events calendar",
        ],
        transportation=[
            "Research local transportation options",
            "Book airport transfers",
            "Consider getting a local SIM card",
        ],
    ),
    next_step="Please select a destination to get personalized recommendations.",
)


def advice_for(context: TravelContext) -> AIResponse:
    """Recommendations for the planned destination, or general travel advice."""
    destination = (context.destination or "").strip().lower()
    advice = _DESTINATION_ADVICE.get(destination, _GENERAL_ADVICE)
    return advice.model_copy(deep=True)


def suggest_next_step(context: TravelContext) -> str:
    if not context.destination:
        return "destination"
    if not context.selected_accommodation:
        return "accommodation"
    if not context.selected_flight:
        return "flight"
    if context.add_ons is None:
        return "addons"
    return "summary"


def _bullets(items: list[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


def destination_guide(destination: CanonicalDestination) -> str:
    return (
        f"I've found some great information about {destination.name}!\n\n"
        f"🌍 {destination.name}, {destination.country}\n"
        f"💬 Language: {destination.language}\n"
        f"💰 Currency: {destination.currency}\n"
        f"🌤️ Climate: {destination.climate}\n"
        f"⏰ Time Zone: {destination.time_zone}\n\n"
        f"Best time to visit: {destination.best_time_to_visit}\n\n"
        f"Must-visit places:\n{_bullets(destination.highlights)}\n\n"
        f"Local tips:\n{_bullets(destination.local_tips)}"
    )


def format_budget(amount: float) -> str:
    return f"{amount:,.2f}".rstrip("0").rstrip(".")


def budget_guide(context: TravelContext) -> str:
    return (
        f"Great! I'll help you plan your trip to {context.destination} "
        f"with a budget of ${format_budget(context.budget)}.\n\n"
        "Let me search for the best accommodations and activities within your budget...\n\n"
        "I'll check:\n"
        "• Hotels and accommodations\n"
        "• Local activities and attractions\n"
        "• Transportation options\n"
        "• Dining recommendations\n\n"
        "Would you like to proceed with finding accommodations?"
    )


def accommodation_guide(context: TravelContext, accommodation: Accommodation) -> str:
    rating = f"{accommodation.rating:g}"
    return (
        f"I've found a perfect place for your stay in {context.destination}! 🎉\n\n"
        f"🏨 {accommodation.name}\n"
        f"📍 Location: {accommodation.location}\n"
        f"💰 Price: {accommodation.price}\n"
        f"⭐ Rating: {rating}/5\n\n"
        f"✨ Top Amenities:\n{_bullets(accommodation.amenities[:5])}\n\n"
        f"📝 About:\n{accommodation.description}\n\n"
        "Would you like to book this accommodation? I can help you with the reservation process!"
    )


def trip_totals(context: TravelContext) -> dict:
    """Running cost of the selections against the trip budget."""
    total = 0.0
    if context.selected_accommodation:
        total += context.selected_accommodation.price * context.selected_accommodation.nights
    if context.selected_flight:
        total += context.selected_flight.price
    if context.add_ons:
        total += sum(a.price for a in context.add_ons)
    return {
        "total": round(total, 2),
        "budget": context.budget,
        "remaining": round((context.budget or 0) - total, 2),
    }
