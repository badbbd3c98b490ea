"""Booking tools: catalog, schedule, slots, conflicts, validation, storage, export."""
