"""Secret word pool for the imposter game."""

from typing import List, Optional
import random

WORD_GROUPS = {
    'food': [
        "Pizza", "Hamburger", "Sushi", "Taco", "Coffee",
        "Smoothie", "Pancakes", "Chocolate", "Popcorn", "Ice Cream",
    ],
    'animals': [
        "Elephant", "Penguin", "Dolphin", "Giraffe", "Butterfly",
        "Kangaroo", "Octopus", "Flamingo", "Hedgehog", "Chameleon",
    ],
    'technology': [
        "Smartphone", "Laptop", "Headphones", "Keyboard", "Camera",
        "Drone", "Router", "Smartwatch", "Tablet", "USB Cable",
    ],
    'nature': [
        "Rainbow", "Waterfall", "Mountain", "Volcano", "Aurora",
        "Sunset", "Lightning", "Tornado", "Earthquake", "Tsunami",
    ],
    'sports': [
        "Basketball", "Soccer", "Chess", "Bowling", "Surfing",
        "Skateboard", "Tennis", "Golf", "Baseball", "Swimming",
    ],
    'objects': [
        "Umbrella", "Sunglasses", "Backpack", "Watch", "Bicycle",
        "Skateboard", "Telescope", "Microscope", "Globe", "Compass",
    ],
    'entertainment': [
        "Guitar", "Piano", "Microphone", "Karaoke", "Cinema",
        "Painting", "Sculpture", "Theater", "Concert", "Festival",
    ],
    'space': [
        "Astronaut", "Rocket", "Satellite", "Galaxy", "Telescope",
        "Black Hole", "Comet", "Meteor", "Space Station", "Mars Rover",
    ],
    'fantasy': [
        "Dragon", "Unicorn", "Phoenix", "Mermaid", "Wizard",
        "Fairy", "Giant", "Centaur", "Kraken", "Griffin",
    ],
    'professions': [
        "Chef", "Firefighter", "Astronaut", "Detective", "Scientist",
        "Artist", "Musician", "Pilot", "Surgeon", "Architect",
    ],
    'transportation': [
        "Airplane", "Submarine", "Helicopter", "Hot Air Balloon", "Roller Coaster",
        "Spaceship", "Cruise Ship", "Motorcycle", "Train", "Scooter",
    ],
    'weather': [
        "Snowflake", "Sunshine", "Raindrop", "Thunder", "Breeze",
        "Fog", "Hailstorm", "Blizzard", "Hurricane", "Sandstorm",
    ],
}


def _build_pool() -> List[str]:
    # Some words sit in two groups; keep the first occurrence only
    seen = set()
    pool = []
    for words in WORD_GROUPS.values():
        for word in words:
            if word not in seen:
                seen.add(word)
                pool.append(word)
    return pool


WORDS = _build_pool()


def get_random_word(rng: Optional[random.Random] = None) -> str:
    """Get a random secret word."""
    return (rng or random).choice(WORDS)


def get_random_words(count: int, rng: Optional[random.Random] = None) -> List[str]:
    """Get up to count distinct secret words."""
    return (rng or random).sample(WORDS, min(count, len(WORDS)))


def is_valid_word(word: str) -> bool:
    """Check if a word is in the pool."""
    return word in WORDS
