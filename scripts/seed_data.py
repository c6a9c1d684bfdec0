# Fichier: wortschatz/backend/scripts/seed_data.py
"""Peuple le catalogue initial (vocabulaire A1 à B1 et badges de départ).

Chaque table n'est remplie que si elle est vide : relancer le script est sans effet.

    python scripts/seed_data.py
"""

import logging
import sys
from pathlib import Path

from sqlalchemy import func
from sqlalchemy.orm import Session

# --- Configuration du chemin et des imports ---
sys.path.append(str(Path(__file__).resolve().parents[1]))
from app.db.base import Base  # noqa: E402 - charge tous les modèles
from app.db.session import SessionLocal, sync_engine  # noqa: E402
from app.gamification.badge_rules import STARTER_BADGES  # noqa: E402
from app.models.user.badge_model import Badge  # noqa: E402
from app.models.vocabulary.vocabulary_model import Vocabulary  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# (mot, sens, exemple, catégorie)
STARTER_VOCABULARY = (
    # A1
    ("Hallo", "Hello", "Hallo, wie geht es dir?", "A1"),
    ("Danke", "Thank you", "Danke schön!", "A1"),
    ("Ja", "Yes", "Ja, das ist richtig.", "A1"),
    ("Nein", "No", "Nein, das ist falsch.", "A1"),
    ("Bitte", "Please/You're welcome", "Bitte sehr!", "A1"),
    ("Tschüss", "Goodbye", "Tschüss, bis morgen!", "A1"),
    ("Guten Morgen", "Good morning", "Guten Morgen! Wie hast du geschlafen?", "A1"),
    ("Gute Nacht", "Good night", "Gute Nacht und schlaf gut!", "A1"),
    ("Entschuldigung", "Excuse me/Sorry", "Entschuldigung, wo ist der Bahnhof?", "A1"),
    ("Ich", "I", "Ich heiße Anna.", "A1"),
    ("Du", "You (informal)", "Wie heißt du?", "A1"),
    ("Wir", "We", "Wir gehen ins Kino.", "A1"),
    ("Essen", "Food/To eat", "Das Essen schmeckt gut.", "A1"),
    ("Trinken", "To drink", "Ich möchte Wasser trinken.", "A1"),
    ("Haus", "House", "Mein Haus ist groß.", "A1"),
    # A2
    ("Vielleicht", "Maybe/Perhaps", "Vielleicht komme ich morgen.", "A2"),
    ("Wichtig", "Important", "Das ist sehr wichtig für mich.", "A2"),
    ("Verstehen", "To understand", "Ich verstehe nicht.", "A2"),
    ("Glauben", "To believe", "Ich glaube dir.", "A2"),
    ("Gefühl", "Feeling", "Ich habe ein gutes Gefühl.", "A2"),
    ("Gesundheit", "Health", "Gesundheit ist wichtig.", "A2"),
    ("Erklären", "To explain", "Kannst du das erklären?", "A2"),
    ("Manchmal", "Sometimes", "Manchmal gehe ich spazieren.", "A2"),
    ("Niemand", "Nobody", "Niemand ist zu Hause.", "A2"),
    ("Überall", "Everywhere", "Überall sind Menschen.", "A2"),
    # B1
    ("Trotzdem", "Nevertheless", "Es regnet, trotzdem gehe ich raus.", "B1"),
    ("Außerdem", "Moreover/Besides", "Außerdem möchte ich noch etwas sagen.", "B1"),
    ("Allerdings", "However", "Das stimmt allerdings nicht.", "B1"),
    ("Vermutlich", "Presumably", "Vermutlich kommt er später.", "B1"),
    ("Eigentlich", "Actually", "Eigentlich wollte ich etwas anderes sagen.", "B1"),
    ("Beziehung", "Relationship", "Wir haben eine gute Beziehung.", "B1"),
    ("Verantwortung", "Responsibility", "Du trägst die Verantwortung.", "B1"),
    ("Gesellschaft", "Society", "Die Gesellschaft verändert sich.", "B1"),
    ("Erfahrung", "Experience", "Ich habe viel Erfahrung.", "B1"),
    ("Entscheidung", "Decision", "Das war eine schwere Entscheidung.", "B1"),
)


def seed_vocabulary(db: Session) -> int:
    logger.info("--- Phase 1: Vocabulaire ---")
    if db.query(func.count(Vocabulary.id)).scalar():
        logger.warning("⚠️  Le vocabulaire existe déjà, phase ignorée.")
        return 0

    for word, meaning, example, category in STARTER_VOCABULARY:
        db.add(Vocabulary(word=word, meaning=meaning, example_sentence=example, category=category))
    db.commit()
    logger.info("✅ %s mots insérés.", len(STARTER_VOCABULARY))
    return len(STARTER_VOCABULARY)


def seed_badges(db: Session) -> int:
    logger.info("--- Phase 2: Badges ---")
    if db.query(func.count(Badge.id)).scalar():
        logger.warning("⚠️  Les badges existent déjà, phase ignorée.")
        return 0

    for starter in STARTER_BADGES:
        db.add(
            Badge(
                name=starter.name,
                description=starter.description,
                icon=starter.icon,
                criteria_type=starter.criteria_type,
                criteria_value=starter.criteria_value,
            )
        )
    db.commit()
    logger.info("✅ %s badges insérés.", len(STARTER_BADGES))
    return len(STARTER_BADGES)


def main() -> None:
    logger.info("🌱 Démarrage du seeding...")
    Base.metadata.create_all(bind=sync_engine)
    db = SessionLocal()
    try:
        seed_vocabulary(db)
        seed_badges(db)
    except Exception:
        db.rollback()
        logger.exception("❌ Le seeding a échoué.")
        raise
    finally:
        db.close()
    logger.info("✅ Seeding terminé.")


if __name__ == "__main__":
    main()
