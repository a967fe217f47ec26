"""
CLI helper to load property listings into the database.

Reads a JSON file holding one listing object or a list of them (camelCase
keys, the same shape the create endpoint accepts). Images must already be
hosted; their URLs are stored as given. Without --file a couple of sample
listings are inserted for local development.
"""
import argparse
import json
import sys
from pathlib import Path

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError

from src.estatesite.api.schemas import PropertyCreate
from src.estatesite.db.repository import PropertyRepository
from src.estatesite.db.session import get_db_session
from src.estatesite.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

SAMPLE_PROPERTIES = [
    {
        "title": "Marina Vista Residences",
        "propertyType": "Apartment",
        "city": "Dubai",
        "location": "Dubai Marina",
        "propertyStatus": "Off-Plan",
        "startingPrice": 1850000,
        "bhkCount": 2,
        "bathCount": 2,
        "totalArea": 1240,
        "description": "Waterfront apartments with full marina views.",
        "developer": "Emaar",
        "usp": "Direct beach access",
        "constructionStatus": "Under Construction",
        "handover": "Q4 2027",
        "floors": 42,
        "elevation": "G+4P+38+R",
        "paymentPlan": "60/40",
        "totalUnits": 320,
        "views": "Marina, Sea",
        "unitTypes": [
            {"type": "1 BHK", "totalAreaStart": 720, "totalAreaEnd": 810, "price": 1250000},
            {"type": "2 BHK", "totalAreaStart": 1180, "totalAreaEnd": 1300, "price": 1850000},
        ],
        "highlights": ["Infinity pool", "Private beach"],
        "amenities": ["Swimming Pool", "Gym", "Parking"],
        "images": ["https://res.cloudinary.com/demo/image/upload/v1/properties/marina-vista-1.jpg"],
    },
    {
        "title": "Palm Grove Villas",
        "propertyType": "Villa",
        "city": "Dubai",
        "location": "Palm Jumeirah",
        "propertyStatus": "Buy",
        "startingPrice": 9500000,
        "bhkCount": 5,
        "bathCount": 6,
        "totalArea": 6200,
        "description": "Beachfront villas on the fronds of Palm Jumeirah.",
        "developer": "Nakheel",
        "usp": "Private beach and garden",
        "constructionStatus": "Ready to Move",
        "handover": "Ready",
        "floors": 3,
        "elevation": "G+2",
        "paymentPlan": "Cash",
        "totalUnits": 24,
        "views": "Sea, Skyline",
        "unitTypes": [
            {"type": "5 BHK Villa", "totalAreaStart": 6200, "totalAreaEnd": 7400, "price": 9500000},
        ],
        "highlights": ["Private pool"],
        "amenities": ["Private Pool", "Garden", "Security"],
        "images": ["https://res.cloudinary.com/demo/image/upload/v1/properties/palm-grove-1.jpg"],
    },
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Insert property listings from a JSON file.")
    parser.add_argument("--file", dest="file_path", help="JSON file with one listing or a list of listings.")
    return parser.parse_args()


def load_listings(file_path: str) -> list:
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"{path} not found.")

    raw = json.loads(path.read_text())
    if isinstance(raw, dict):
        return [raw]
    if not isinstance(raw, list):
        raise ValueError("Listings JSON must be an object or a list of objects.")
    return raw


def main():
    args = parse_args()
    setup_logging()

    listings = load_listings(args.file_path) if args.file_path else SAMPLE_PROPERTIES
    repository = PropertyRepository()
    stats = {"processed": 0, "inserted": 0, "failed": 0}

    with get_db_session() as session:
        for index, item in enumerate(listings):
            stats["processed"] += 1
            try:
                payload = PropertyCreate(**item)
            except ValidationError as e:
                stats["failed"] += 1
                logger.warning("listing_invalid", index=index, errors=e.errors(include_url=False))
                continue

            prop = repository.create(session, is_on_home_page=False, **payload.model_dump())
            stats["inserted"] += 1
            logger.info("listing_inserted", index=index, id=prop.id, title=prop.title)

    logger.info("seed_complete", stats=stats)
    print(f"\nListings loaded:")
    print(f"  Processed: {stats['processed']}")
    print(f"  Inserted:  {stats['inserted']}")
    print(f"  Failed:    {stats['failed']}")


if __name__ == "__main__":
    main()
