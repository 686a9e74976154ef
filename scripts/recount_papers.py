# scripts/recount_papers.py
import sys
import os

# Add the project root to the python path so we can import from database
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), '..', '.env.local')
if not os.path.exists(env_path):
    env_path = os.path.join(os.path.dirname(__file__), '..', '.env')
load_dotenv(env_path)

from database.db import SessionLocal
from services.counter_service import recount_all


def recount_papers():
    """
    Re-derives research_papers_count for every researcher from the
    research_papers table.
    """
    with SessionLocal() as db:
        try:
            touched = recount_all(db)
        except Exception as e:
            db.rollback()
            print(f"Error recounting papers: {e}")
            sys.exit(1)
    print(f"Recounted papers for {touched} researchers.")


if __name__ == "__main__":
    recount_papers()
