"""Sample data seeders.

Each seeder inserts ``count`` random rows built from fixed vocabularies, in
one transaction and in batches. A table that already has rows is left alone.
"""

import logging
import random
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from linkeun_api.models import Animal, Base, Flower

logger = logging.getLogger(__name__)

BATCH_SIZE = 100

PET_NAMES = (
    "Bella", "Max", "Luna", "Charlie", "Lucy", "Cooper", "Daisy", "Milo",
    "Sadie", "Rocky", "Molly", "Buddy", "Bailey", "Maggie", "Jack",
    "Lola", "Oliver", "Stella", "Zeus", "Lily", "Duke", "Zoe", "Bentley",
    "Sophie", "Toby", "Chloe", "Dexter", "Penny", "Gus", "Willow",
)
ANIMAL_SPECIES = (
    "Dog", "Cat", "Rabbit", "Hamster", "Guinea Pig", "Parrot", "Goldfish",
    "Turtle", "Snake", "Lizard", "Horse", "Cow", "Pig", "Sheep", "Goat",
    "Chicken", "Duck", "Donkey", "Ferret", "Chinchilla",
)
ANIMAL_DESCRIPTIONS = (
    "Very friendly and playful",
    "A bit shy but very loving",
    "Energetic and loves to run",
    "Calm and well-behaved",
    "Curious and intelligent",
    "Loves cuddles and attention",
    "Independent but affectionate",
    "Protective and loyal",
    "Gentle with children",
    "Loves to play with toys",
    "Very social with other animals",
    "Quiet and observant",
)

FLOWER_NAMES = (
    "Rose", "Tulip", "Daisy", "Sunflower", "Lily", "Orchid", "Daffodil",
    "Carnation", "Peony", "Iris", "Chrysanthemum", "Poppy", "Marigold",
    "Hibiscus", "Magnolia", "Lavender", "Dahlia", "Hydrangea", "Jasmine",
    "Bluebell", "Cherry Blossom", "Buttercup", "Forget-me-not", "Dandelion",
)
FLOWER_SPECIES = (
    "Rosa", "Tulipa", "Bellis", "Helianthus", "Lilium", "Orchidaceae",
    "Narcissus", "Dianthus", "Paeonia", "Iridaceae", "Chrysanthemum",
    "Papaver", "Tagetes", "Hibiscus", "Magnolia", "Lavandula", "Dahlia",
    "Hydrangea", "Jasminum", "Hyacinthoides", "Prunus", "Ranunculus",
    "Myosotis", "Taraxacum",
)
FLOWER_COLORS = (
    "Red", "Pink", "Yellow", "Orange", "Purple", "Blue", "White",
    "Violet", "Indigo", "Cream", "Coral", "Lavender", "Maroon",
    "Fuchsia", "Peach", "Magenta", "Crimson", "Lilac", "Gold", "Burgundy",
)
FLOWER_DESCRIPTIONS = (
    "Beautiful fragrant flower with soft petals",
    "Bold and vibrant with striking colors",
    "Delicate flower with a sweet fragrance",
    "Hardy perennial with long-lasting blooms",
    "Exotic flower with unique features",
    "Perfect for garden borders and beds",
    "Elegant flower that attracts butterflies",
    "Drought-resistant variety with minimal care needs",
    "Showy blooms that make excellent cut flowers",
    "Spreads rapidly with abundant flowers",
    "Rare variety with spectacular blooms",
    "Native wildflower with ecological benefits",
)


class Seeder:
    """Base seeder. Subclasses set ``name``, ``model`` and ``generate``."""

    name = ""
    model: type[Base]

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        count: int = 100,
        rng: random.Random | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._count = count
        self._rng = rng or random.Random()

    def generate(self) -> dict[str, Any]:
        raise NotImplementedError

    def seed(self) -> int:
        """Insert ``count`` rows unless the table already has data.

        Returns:
            Number of rows inserted
        """
        with self._session_factory.begin() as session:
            existing = session.scalar(select(func.count()).select_from(self.model)) or 0
            if existing > 0:
                logger.info("%s already has rows, skipping seeding", self.model.__tablename__, extra={"count": existing})
                return 0

            rows = [self.model(**self.generate()) for _ in range(self._count)]
            logger.info("Seeding %s", self.model.__tablename__, extra={"count": len(rows)})
            for start in range(0, len(rows), BATCH_SIZE):
                session.add_all(rows[start:start + BATCH_SIZE])
                session.flush()

        logger.info("Seeded %s", self.model.__tablename__, extra={"count": len(rows)})
        return len(rows)


class AnimalSeeder(Seeder):
    name = "animal"
    model = Animal

    def generate(self) -> dict[str, Any]:
        return {
            "name": self._rng.choice(PET_NAMES),
            "species": self._rng.choice(ANIMAL_SPECIES),
            "age": self._rng.randint(1, 15),
            "description": self._rng.choice(ANIMAL_DESCRIPTIONS),
        }


class FlowerSeeder(Seeder):
    name = "flower"
    model = Flower

    def generate(self) -> dict[str, Any]:
        return {
            "name": self._rng.choice(FLOWER_NAMES),
            "species": self._rng.choice(FLOWER_SPECIES),
            "color": self._rng.choice(FLOWER_COLORS),
            "description": self._rng.choice(FLOWER_DESCRIPTIONS),
            "seasonal": self._rng.random() < 0.5,
        }


SEEDERS: dict[str, type[Seeder]] = {
    AnimalSeeder.name: AnimalSeeder,
    FlowerSeeder.name: FlowerSeeder,
}
