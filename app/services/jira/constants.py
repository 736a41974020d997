"""Constants for Jira service."""

API_PREFIX = "/rest/api/3"

# Query params for the three activity sources
CHANGELOG_PARAMS: dict[str, str] = {"expand": "changelog"}
ATTACHMENT_PARAMS: dict[str, str] = {"fields": "attachment"}
