"""Shared helpers for CLI commands."""

from __future__ import annotations

import argparse
from datetime import date

from ..config import Config
from ..search import RetrievalMode


def apply_cli_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command-line overrides to config."""
    if getattr(args, "folder", None):
        config.imap.folder = args.folder
    if getattr(args, "read_only", False):
        config.imap.read_only = True
    if getattr(args, "queue_size", None) is not None:
        config.retrieval.queue_size = args.queue_size
    if getattr(args, "mark_read", False):
        config.retrieval.mark_as_read = True
    if getattr(args, "keep_unread", False):
        config.retrieval.mark_as_read = False
    if getattr(args, "delete", False):
        config.retrieval.delete = True

    return config


def parse_mode(args: argparse.Namespace) -> RetrievalMode:
    """Pick the retrieval mode from --unread / --since."""
    since = getattr(args, "since", None)
    if since:
        return RetrievalMode.since_date(date.fromisoformat(since))
    if getattr(args, "unread", False):
        return RetrievalMode.unread()
    return RetrievalMode.all()
