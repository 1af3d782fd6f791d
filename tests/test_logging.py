"""
Tests for secret redaction in log output.
"""

import io
import logging

import pytest

from finance_ledger_api.app.core.logging_config import REDACTED, RedactSecretsFilter, redact
from finance_ledger_api.app.core.security import issue_token


TOKEN = issue_token("alice", "log-secret", 300, now=1_700_000_000)


@pytest.mark.parametrize(
    "message",
    [
        f"Authorization: Bearer {TOKEN}",
        f"rejected token {TOKEN}",
        "payload {'username': 'alice', 'password': 'hunter2'}",
        "login password=hunter2 failed",
    ],
)
def test_secrets_are_masked(message):
    cleaned = redact(message)

    assert REDACTED in cleaned
    assert TOKEN not in cleaned
    assert "hunter2" not in cleaned


def test_plain_messages_pass_unchanged():
    message = "Listing accounts with ByUserAndTypeAndCategory"

    assert redact(message) == message


def test_filter_rewrites_formatted_record():
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RedactSecretsFilter())
    logger = logging.getLogger("finance_ledger_api.tests.redaction")
    logger.addHandler(handler)
    logger.propagate = False
    try:
        logger.warning("Rejected header %s for %s", f"Bearer {TOKEN}", "alice")
    finally:
        logger.removeHandler(handler)
        logger.propagate = True

    output = stream.getvalue()
    assert TOKEN not in output
    assert f"Bearer {REDACTED} for alice" in output
