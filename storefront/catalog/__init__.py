from storefront.catalog.availability import generate_availability
from storefront.catalog.slot_selection import SelectionError, SlotSelection

__all__ = ["generate_availability", "SlotSelection", "SelectionError"]
