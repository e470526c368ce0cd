"""Static vocabulary for the activity idea generator.

Used for:
- keyword -> category / activity type scoring
- title and description templates per category
- default durations (hours) and budget categories
"""

# Category keywords, scored against destination keywords (declaration order breaks ties)
ACTIVITY_CATEGORIES: dict[str, list[str]] = {
    "CULTURE": [
        "museum", "history", "art", "gallery", "theater", "performance",
        "exhibition", "landmark", "heritage", "culture", "historical",
    ],
    "NATURE": [
        "park", "garden", "trail", "hike", "mountain", "beach", "lake", "river",
        "forest", "nature", "outdoor", "landscape", "wildlife",
    ],
    "FOOD": [
        "restaurant", "cafe", "eatery", "culinary", "food", "cuisine", "dinner",
        "lunch", "breakfast", "brunch", "tasting", "market",
    ],
    "ADVENTURE": [
        "adventure", "sport", "activity", "rafting", "climbing", "surfing",
        "diving", "paragliding", "kayaking", "biking", "cycling",
    ],
    "RELAXATION": [
        "spa", "relax", "massage", "wellness", "retreat", "meditation", "yoga",
        "hot spring", "thermal", "chill",
    ],
    "SHOPPING": [
        "shop", "market", "mall", "boutique", "store", "shopping", "souvenir",
        "craft", "fair", "bazaar", "local goods",
    ],
    "NIGHTLIFE": [
        "bar", "club", "pub", "lounge", "nightlife", "night", "cocktail",
        "entertainment", "music", "dance", "concert",
    ],
    "TRANSPORT": [
        "tour", "cruise", "ferry", "train", "tram", "cable car", "scenic drive",
        "boat", "bicycle", "rental",
    ],
}

ACTIVITY_TYPES: dict[str, list[str]] = {
    "LANDMARK": [
        "landmark", "monument", "statue", "tower", "palace", "castle",
        "cathedral", "church", "temple",
    ],
    "MUSEUM": ["museum", "gallery", "exhibition", "collection", "artifact"],
    "PARK": ["park", "garden", "square", "plaza", "green space", "botanical"],
    "BEACH": ["beach", "coastline", "shore", "bay", "oceanfront", "seashore"],
    "RESTAURANT": ["restaurant", "dining", "eatery", "cafe", "bistro", "cuisine"],
    "ADVENTURE": ["adventure", "tour", "excursion", "expedition", "quest", "journey", "trip"],
    "SHOPPING": ["shopping", "market", "bazaar", "shop", "mall", "boutique", "store"],
    "EVENT": ["event", "festival", "celebration", "fair", "concert", "performance", "show"],
}

STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "but", "or", "for", "nor", "on", "at", "to", "by",
    "of", "is", "are", "was", "were", "be", "been", "being", "have", "has",
    "had", "do", "does", "did", "will", "would", "should", "can", "could", "in",
    "into", "during", "before", "after", "above", "below", "from", "up", "down",
    "with", "about", "against", "between", "through", "throughout", "this",
    "that", "these", "those", "there", "here", "i", "you", "he", "she", "it",
    "we", "they", "me", "him", "her", "us", "them",
})

TITLE_TEMPLATES: dict[str, list[str]] = {
    "CULTURE": [
        "Wander through {keyword} {type}",
        "Take photos at the historic {keyword} {type}",
        "Hear stories from local guides at {keyword} {type}",
        "Learn {keyword} traditions at the {type}",
        "Sketch the architecture of {keyword} {type}",
    ],
    "NATURE": [
        "Hike through {keyword} {type} at sunrise",
        "Picnic overlooking the {keyword} {type}",
        "Watch wildlife at {keyword} {type}",
        "Swim in the clear waters of {keyword} {type}",
        "Photograph the sunset at {keyword} {type}",
    ],
    "FOOD": [
        "Try {keyword} street food at the local {type}",
        "Sample {keyword} wine with cheese at a {type}",
        "Learn to cook {keyword} dishes at a {type}",
        "Taste {keyword} coffee at a hidden {type}",
        "Join locals for {keyword} dinner at a family {type}",
    ],
    "ADVENTURE": [
        "Zip-line over the {keyword} {type}",
        "Kayak through {keyword} {type}",
        "Climb the challenging {keyword} {type}",
        "Mountain bike down {keyword} {type} trails",
        "Go paragliding over {keyword} {type}",
    ],
    "RELAXATION": [
        "Soak in the {keyword} thermal {type}",
        "Practice yoga overlooking {keyword} {type}",
        "Book a traditional {keyword} {type} treatment",
        "Meditate at a peaceful {keyword} {type}",
        "Unwind with a sunset {keyword} {type} session",
    ],
    "SHOPPING": [
        "Haggle for treasures at {keyword} {type}",
        "Find handmade crafts at {keyword} {type}",
        "Support local artisans at {keyword} {type}",
        "Hunt for vintage finds at {keyword} {type}",
        "Browse local spices at {keyword} {type}",
    ],
    "NIGHTLIFE": [
        "Dance until dawn at a {keyword} {type}",
        "Sip craft cocktails at a rooftop {keyword} {type}",
        "Listen to live jazz at {keyword} {type}",
        "Join locals at an underground {keyword} {type}",
        "Taste local brews at a {keyword} {type}",
    ],
    "TRANSPORT": [
        "Rent a vintage Vespa to explore {keyword} {type}",
        "Take a sunset sailboat tour of {keyword} {type}",
        "Cycle along the {keyword} {type} path",
        "Ride the historic tram through {keyword} {type}",
        "Hire a local guide to show you hidden {keyword} {type}",
    ],
}

PLACE_WORDS: dict[str, list[str]] = {
    "CULTURE": ["history museum", "local gallery", "historic palace", "ancient ruins", "cultural festival", "traditional workshop"],
    "NATURE": ["hidden lake", "mountain vista", "coastal trail", "forest reserve", "valley overlook", "secret beach"],
    "FOOD": ["family-run bistro", "street food stalls", "cooking class", "food festival", "farmers market", "wine vineyard"],
    "ADVENTURE": ["rock climbing spot", "white water rapids", "zip-line course", "mountain biking trail", "kayaking waters", "paragliding launch"],
    "RELAXATION": ["thermal springs", "beachfront yoga class", "hillside meditation spot", "traditional massage house", "garden retreat", "forest bath"],
    "SHOPPING": ["artisan market", "antique district", "local craft shops", "designer boutiques", "vintage stores", "weekend bazaar"],
    "NIGHTLIFE": ["rooftop bar", "jazz club", "underground speakeasy", "beachfront lounge", "live music venue", "local brewery"],
    "TRANSPORT": ["vintage tram", "canal boat", "scenic railway", "coastal ferry", "bicycle paths", "vespa tour"],
}

DESCRIPTION_TEMPLATES: dict[str, list[str]] = {
    "CULTURE": [
        "Immerse yourself in {destination}'s rich culture and history.",
        "Explore the artistic treasures and historical significance of this iconic place.",
        "Discover the local heritage that makes {destination} unique.",
        "Step back in time and connect with {destination}'s fascinating past.",
        "Experience the cultural richness that defines {destination}.",
    ],
    "NATURE": [
        "Connect with the natural beauty that surrounds {destination}.",
        "Escape the city and enjoy the breathtaking landscapes nearby.",
        "Take in the stunning scenery that makes {destination} special.",
        "Refresh your spirit with {destination}'s outdoor wonders.",
        "Experience the natural splendor that attracts visitors to {destination}.",
    ],
    "FOOD": [
        "Savor the authentic flavors that define {destination}'s culinary scene.",
        "Treat your taste buds to the local specialties {destination} is known for.",
        "Experience the gastronomic delights that locals love in {destination}.",
        "Discover why {destination}'s food scene is a highlight for visitors.",
        "Indulge in the culinary traditions that tell the story of {destination}.",
    ],
    "ADVENTURE": [
        "Get your adrenaline pumping with this exciting activity in {destination}.",
        "Challenge yourself with this thrilling adventure experience.",
        "Break out of your comfort zone with this popular {destination} activity.",
        "Create unforgettable memories with this exciting excursion.",
        "Experience {destination} from a more adventurous perspective.",
    ],
    "RELAXATION": [
        "Take time to unwind and rejuvenate during your stay in {destination}.",
        "Escape the hustle and treat yourself to some well-deserved relaxation.",
        "Refresh your body and mind with this peaceful {destination} experience.",
        "Find your zen moment amid the excitement of your {destination} trip.",
        "Balance your active itinerary with this calming activity.",
    ],
    "SHOPPING": [
        "Find unique treasures and souvenirs to remember your {destination} trip.",
        "Browse local crafts and goods that showcase {destination}'s character.",
        "Discover why shopping in {destination} is an experience in itself.",
        "Support local artisans and businesses while finding special mementos.",
        "Explore the markets and shops that give {destination} its distinctive flavor.",
    ],
    "NIGHTLIFE": [
        "Experience {destination} after dark and see another side of the city.",
        "Join locals for an authentic evening out in {destination}.",
        "Unwind after a day of sightseeing with {destination}'s evening offerings.",
        "Discover the vibrant night scene that makes {destination} special.",
        "Create memorable evening moments during your {destination} adventure.",
    ],
    "TRANSPORT": [
        "See {destination} from a different perspective with this transportation option.",
        "Cover more ground and discover hidden gems around {destination}.",
        "Enjoy the journey as much as the destinations around {destination}.",
        "Travel like a local and experience {destination} more authentically.",
        "Make getting around part of your {destination} adventure.",
    ],
}

TYPE_DURATIONS: dict[str, float] = {
    "MUSEUM": 2, "LANDMARK": 1.5, "PARK": 2, "BEACH": 3,
    "RESTAURANT": 1.5, "ADVENTURE": 4, "SHOPPING": 2, "EVENT": 3,
}

CATEGORY_DURATIONS: dict[str, float] = {
    "CULTURE": 2, "NATURE": 3, "FOOD": 1.5, "ADVENTURE": 3.5,
    "RELAXATION": 2, "SHOPPING": 2.5, "NIGHTLIFE": 3, "TRANSPORT": 1.5,
}

TYPE_BUDGET: dict[str, str] = {
    "RESTAURANT": "food",
    "MUSEUM": "activities",
    "LANDMARK": "activities",
    "SHOPPING": "shopping",
    "BEACH": "activities",
    "PARK": "activities",
    "ADVENTURE": "activities",
    "EVENT": "activities",
}

CATEGORY_BUDGET: dict[str, str] = {
    "FOOD": "food",
    "SHOPPING": "shopping",
    "TRANSPORT": "transportation",
}
