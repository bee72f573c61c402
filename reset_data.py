"""
reset_data.py
-------------
Utility script to clear all stored data (users, cars, rentals) from the
configured MongoDB database.

This script is designed for development and testing purposes.

Usage:
    $ python reset_data.py

After running this script, you can repopulate sample data by executing:
    $ python seeds.py
"""

from carrental.config import Settings
from carrental.models.store import Store


def main():
    """Remove every document from the users, cars and rentals collections."""
    settings = Settings.from_env()
    store = Store.connect(settings)

    store.clear()
    store.close()

    print(f"Database '{settings.mongodb_db}' has been successfully cleared.")
    print("Tip: Run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()
