"""Shared configuration, logging and schema helpers for feedcheck."""
