import json
import logging
import sys
from pathlib import Path

from elasticsearch import ApiError, Elasticsearch, TransportError

# Ensure the repo root is importable when run as a plain script
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.elastic.data_store import IndexManager  # noqa: E402
from src.elastic.es_client import get_elasticsearch_client  # noqa: E402
from src.employees import EmployeeServiceConfig  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
    ]
)
logger = logging.getLogger(__name__)

STORE_ERRORS = (ApiError, TransportError)


def connect() -> Elasticsearch:
    """Connect to Elasticsearch (ELASTICSEARCH_URL, default localhost:9200)."""
    try:
        client = get_elasticsearch_client(retries=3)
        logger.info("✅ Successfully connected to Elasticsearch")
        print("✅ Connected to Elasticsearch")
        return client
    except ConnectionError as e:
        logger.error(f"❌ Failed to connect to Elasticsearch: {e}")
        print(f"❌ Connection failed: {e}")
        sys.exit(1)


def show_status(manager: IndexManager) -> None:
    """Print the index name, existence and document count."""
    try:
        info = manager.index_info()
    except STORE_ERRORS as e:
        logger.error(f"Failed to describe index '{manager.name}': {e}")
        print(f"❌ Failed to describe index: {e}")
        return

    state_str = "🟢 EXISTS" if info["exists"] else "⚪ MISSING"
    count = info["documents"] if info["documents"] is not None else "-"
    print(f"\n{'Index':<30} | {'State':<10} | {'Documents':<10}")
    print("-" * 60)
    print(f"{info['name']:<30} | {state_str:<10} | {count:<10}")
    print("-" * 60)


def create_index(manager: IndexManager) -> None:
    try:
        print(f"⏳ Creating '{manager.name}'...")
        manager.ensure_index()
        print(f"✅ '{manager.name}' is ready.")
    except STORE_ERRORS as e:
        logger.error(f"Failed to create index '{manager.name}': {e}")
        print(f"❌ Failed to create '{manager.name}': {e}")


def show_mapping(manager: IndexManager) -> None:
    """Display the field mapping of the index."""
    try:
        info = manager.index_info()
    except STORE_ERRORS as e:
        logger.error(f"Failed to get mapping for '{manager.name}': {e}")
        print(f"❌ Failed to get mapping: {e}")
        return
    if not info["exists"]:
        print(f"⚪ '{manager.name}' does not exist.")
        return
    print(f"\n🔍 MAPPING FOR: {manager.name}")
    print(json.dumps(info["mapping"], indent=2))
    input("\nPress Enter to continue...")


def _confirmed(manager: IndexManager, action: str) -> bool:
    confirm = input(
        f"⚠️  WARNING: This will {action} '{manager.name}' and all its documents.\n"
        "Type the index name to confirm: "
    )
    if confirm != manager.name:
        logger.info(f"User cancelled {action.lower()} of index '{manager.name}'")
        print("❌ Confirmation failed. Aborted.")
        return False
    return True


def reset_index(manager: IndexManager) -> None:
    if not _confirmed(manager, "RESET"):
        return
    try:
        logger.warning(f"Resetting index '{manager.name}'")
        manager.reset_index()
        print("✅ Index recreated (empty).")
    except STORE_ERRORS as e:
        logger.error(f"Failed to reset index '{manager.name}': {e}")
        print(f"❌ Failed to reset '{manager.name}': {e}")


def drop_index(manager: IndexManager) -> None:
    if not _confirmed(manager, "PERMANENTLY DELETE"):
        return
    try:
        print(f"🗑️  Dropping '{manager.name}'...")
        logger.warning(f"Dropping index '{manager.name}' permanently")
        manager.drop_index()
        print("✅ Index deleted.")
    except STORE_ERRORS as e:
        logger.error(f"Failed to drop index '{manager.name}': {e}")
        print(f"❌ Failed to delete '{manager.name}': {e}")


def main_menu() -> None:
    """Main interactive menu for index management."""
    logger.info("Starting Elasticsearch Index Manager")
    manager = IndexManager(connect(), name=EmployeeServiceConfig().index_name)

    try:
        while True:
            show_status(manager)

            print("\nACTIONS:")
            print("1. [Create]  Create index with employee mapping")
            print("2. [Mapping] View field mapping")
            print("3. [Reset]   Drop and recreate (empty)")
            print("4. [Drop]    Delete index permanently")
            print("Q. Quit")

            choice = input("\nSelect Action: ").lower().strip()
            logger.debug(f"User selected action: {choice}")

            if choice == '1':
                create_index(manager)
            elif choice == '2':
                show_mapping(manager)
            elif choice == '3':
                reset_index(manager)
            elif choice == '4':
                drop_index(manager)
            elif choice == 'q':
                logger.info("User quit the application")
                print("Bye!")
                break
            else:
                logger.warning(f"User entered invalid choice: {choice}")
                print("Invalid choice")
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        print("\n\n🛑 Interrupted. Goodbye!")


def main() -> None:
    """Main entry point for the script."""
    try:
        main_menu()
    except STORE_ERRORS as e:
        logger.error(f"💥 Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
