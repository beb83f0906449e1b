"""Services combining API access with season aggregation."""
