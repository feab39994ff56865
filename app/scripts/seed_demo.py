# ===== app/scripts/seed_demo.py =====
# Usage: python -m app.scripts.seed_demo
from app.config.database import SessionLocal, create_tables
from app.services.salon.seed_service import SeedService


def seed_demo():
    create_tables()
    db = SessionLocal()

    try:
        result = SeedService.seed_demo(db)
        print(f"✅ Demo data seeded: {result}")
    except Exception as e:
        print("❌ Error seeding demo data:", e)
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo()
