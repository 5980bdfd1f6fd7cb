"""Mailchimp OAuth flow and credential storage."""
