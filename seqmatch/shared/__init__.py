"""Shared errors, logging and settings for SEQMATCH."""
