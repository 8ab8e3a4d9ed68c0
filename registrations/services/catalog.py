"""
Occurrence catalog: display names and delivery links per occurrence.
"""
import json
import logging
from pathlib import Path
from django.conf import settings

logger = logging.getLogger(__name__)


def load_catalog() -> dict:
    """
    Load the occurrence catalog configuration.

    Returns:
        Dictionary of occurrence_id -> {"name": ..., "link": ...}
    """
    catalog_path = Path(settings.OCCURRENCE_CATALOG_PATH)

    if not catalog_path.exists():
        logger.warning(f"Occurrence catalog file not found: {catalog_path}")
        return {}

    try:
        with open(catalog_path, 'r', encoding='utf-8') as f:
            catalog = json.load(f)
        if not isinstance(catalog, dict):
            logger.error(f"Occurrence catalog must be a JSON object: {catalog_path}")
            return {}
        logger.debug(f"Loaded {len(catalog)} occurrences")
        return catalog
    except Exception as e:
        logger.error(f"Error loading occurrence catalog: {e}")
        return {}


def _entry(occurrence_id: str, catalog: dict = None) -> dict:
    if catalog is None:
        catalog = load_catalog()
    entry = catalog.get(occurrence_id)
    return entry if isinstance(entry, dict) else {}


def display_name(occurrence_id: str, catalog: dict = None) -> str:
    """Name of the occurrence, or the raw id when it is not in the catalog."""
    return _entry(occurrence_id, catalog).get('name') or occurrence_id


def delivery_link(occurrence_id: str, catalog: dict = None) -> str:
    """Link sent with notifications, or the placeholder link when unknown."""
    return _entry(occurrence_id, catalog).get('link') or settings.OCCURRENCE_PLACEHOLDER_LINK


def compose_message(occurrence_id: str, target_date: str, catalog: dict = None) -> str:
    if catalog is None:
        catalog = load_catalog()
    return settings.NOTIFICATION_MESSAGE_TEMPLATE.format(
        occurrence_id=occurrence_id,
        occurrence_name=display_name(occurrence_id, catalog),
        target_date=target_date,
        link=delivery_link(occurrence_id, catalog),
    )
