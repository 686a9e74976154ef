# scripts/seed_topics.py
import sys
import os

# Add the project root to the python path so we can import from database
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), '..', '.env.local')
if not os.path.exists(env_path):
    env_path = os.path.join(os.path.dirname(__file__), '..', '.env')
load_dotenv(env_path)

from sqlalchemy import select
from database.db import SessionLocal, init_db
from database.models.research_models import ResearchTopic

DEFAULT_TOPICS = [
    ("Artificial Intelligence", "Machine learning, reasoning and intelligent agents"),
    ("Data Science", "Statistics, data mining and large-scale analytics"),
    ("Computer Networks", "Protocols, distributed systems and network security"),
    ("Software Engineering", "Methods, tooling and quality of software systems"),
    ("Cybersecurity", "Cryptography, threat analysis and secure systems"),
    ("Human-Computer Interaction", "Interface design, usability and accessibility"),
    ("Bioinformatics", "Computational methods for biological data"),
    ("Renewable Energy", "Energy generation, storage and smart grids"),
]


def seed_topics(topics=DEFAULT_TOPICS) -> int:
    """
    Inserts any of the given (name, description) topics that are missing.
    Existing topics are left untouched. Returns the number inserted.
    """
    init_db()
    inserted = 0
    with SessionLocal() as db:
        existing = set(db.scalars(select(ResearchTopic.name)).all())
        for name, description in topics:
            if name in existing:
                continue
            db.add(ResearchTopic(name=name, description=description))
            inserted += 1
        db.commit()
    return inserted


if __name__ == "__main__":
    count = seed_topics()
    print(f"Seeded {count} research topics.")
