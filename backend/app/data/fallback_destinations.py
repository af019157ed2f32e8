"""Canonical destinations served when no content source returns anything."""

from app.schemas.destination import AverageCost, CanonicalDestination, Weather

FALLBACK_DATASET_VERSION = "2024.1"

_FALLBACK: list[dict] = [
    {
        "name": "Paris",
        "country": "France",
        "description": "The City of Light, known for its iconic Eiffel Tower, world-class museums, and romantic atmosphere.",
        "image": "https://images.unsplash.com/photo-1502602898657-3e91760cbb34?auto=format&fit=crop&w=800&q=80",
        "type": ["urban", "cultural"],
        "rating": 4.8,
        "reviews": 125000,
        "price_range": "€150-300/night",
        "best_time_to_visit": "April to June, September to October",
        "weather": Weather(summer="Warm (20-25°C)", winter="Cold (5-10°C)"),
        "highlights": ["Eiffel Tower", "Louvre Museum", "Notre-Dame Cathedral", "Champs-Élysées", "Montmartre"],
        "source": "True Travel",
        "url": "https://www.lonelyplanet.com/france/paris",
        "climate": "Temperate",
        "currency": "Euro (€)",
        "language": "French",
        "time_zone": "CET (UTC+1)",
        "local_tips": [
            "Learn basic French phrases",
            "Book museum tickets in advance",
            "Use the Metro for transportation",
            "Visit cafes for authentic experience",
            "Avoid restaurants near major attractions",
        ],
        "average_cost": AverageCost(
            accommodation="€150-300/night", food="€30-50/day", activities="€50-100/day"
        ),
        "visa_info": "Schengen visa required for non-EU citizens",
        "safety": "Generally safe, but beware of pickpockets in tourist areas",
    },
    {
        "name": "Tokyo",
        "country": "Japan",
        "description": "A vibrant metropolis where traditional culture meets cutting-edge technology.",
        "image": "https://images.unsplash.com/photo-1503899036084-c55cdd92da26?auto=format&fit=crop&w=800&q=80",
        "type": ["urban", "cultural"],
        "rating": 4.7,
        "reviews": 98000,
        "price_range": "¥15,000-30,000/night",
        "best_time_to_visit": "March to May, September to November",
        "weather": Weather(summer="Hot and humid (25-35°C)", winter="Cool (5-15°C)"),
        "highlights": ["Senso-ji Temple", "Shibuya Crossing", "Tokyo Skytree", "Tsukiji Outer Market", "Meiji Shrine"],
        "source": "True Travel",
        "url": "https://www.lonelyplanet.com/japan/tokyo",
        "climate": "Humid subtropical",
        "currency": "Japanese Yen (¥)",
        "language": "Japanese",
        "time_zone": "JST (UTC+9)",
        "local_tips": [
            "Get a PASMO/Suica card",
            "Learn basic Japanese etiquette",
            "Try local convenience stores",
            "Use Google Maps for navigation",
            "Visit during cherry blossom season",
        ],
        "average_cost": AverageCost(
            accommodation="¥15,000-30,000/night", food="¥3,000-5,000/day", activities="¥5,000-10,000/day"
        ),
        "visa_info": "Visa-free for many countries, check requirements",
        "safety": "Very safe, one of the safest cities in the world",
    },
    {
        "name": "Bali",
        "country": "Indonesia",
        "description": "A tropical paradise known for its lush landscapes, vibrant culture, and stunning beaches.",
        "image": "https://images.unsplash.com/photo-1537996194471-e657df975ab4?auto=format&fit=crop&w=800&q=80",
        "type": ["beach", "cultural", "nature"],
        "rating": 4.7,
        "reviews": 87000,
        "price_range": "IDR 500,000-1,500,000/night",
        "best_time_to_visit": "April to October",
        "weather": Weather(summer="Warm and dry (25-30°C)", winter="Warm and wet (23-28°C)"),
        "highlights": [
            "Ubud Monkey Forest",
            "Tegallalang Rice Terraces",
            "Uluwatu Temple",
            "Seminyak Beach",
            "Sacred Monkey Forest",
        ],
        "source": "True Travel",
        "url": "https://www.lonelyplanet.com/indonesia/bali",
        "climate": "Tropical",
        "currency": "Indonesian Rupiah (IDR)",
        "language": "Indonesian, Balinese",
        "time_zone": "WITA (UTC+8)",
        "local_tips": [
            "Respect temple dress codes",
            "Learn basic Indonesian phrases",
            "Use Grab/Gojek for transportation",
            "Try local warungs for authentic food",
            "Visit during dry season",
        ],
        "average_cost": AverageCost(
            accommodation="IDR 500,000-1,500,000/night",
            food="IDR 100,000-200,000/day",
            activities="IDR 200,000-500,000/day",
        ),
        "visa_info": "Visa on arrival for many countries",
        "safety": "Generally safe, but be cautious of petty theft",
    },
]


def fallback_destinations() -> list[CanonicalDestination]:
    """Fresh copies of the fixed fallback dataset."""
    return [CanonicalDestination(**entry) for entry in _FALLBACK]
