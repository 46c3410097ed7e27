import os
import sys

# Add root to pythonpath
sys.path.append(os.getcwd())

from src.adapters.sqlite.docstore import Initialized, initialize_document_store
from src.components.redirects import REDIRECTS_COLLECTION

SAMPLE_REDIRECTS = [
    {"source": "/old-page", "destination": "/new-page", "type": "301", "openInNewTab": False},
    {"source": "/promo", "destination": "/offers/summer", "type": "302", "openInNewTab": False},
    {"source": "/docs", "destination": "https://docs.example.com/", "type": "301", "openInNewTab": True},
]


def seed():
    db_path = os.environ.get("STRATIC_DB_PATH", "./data/stratic.db")
    os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
    print(f"Seeding to {db_path}")

    init = initialize_document_store(db_path)
    if not isinstance(init, Initialized):
        print(f"Cannot open document store: {init.reason}", file=sys.stderr)
        sys.exit(1)

    existing = {doc.get("source") for doc in init.store.list_all(REDIRECTS_COLLECTION)}
    for data in SAMPLE_REDIRECTS:
        if data["source"] in existing:
            print(f"Skipping {data['source']} (exists)")
            continue
        doc_id = init.store.add(REDIRECTS_COLLECTION, data)
        print(f"Added redirect {data['source']} -> {data['destination']} ({doc_id})")


if __name__ == "__main__":
    seed()
