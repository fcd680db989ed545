"""REST API for the Customs Review Service."""
