"""E-mail addresses of the users, stored in the local configuration."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from typing import Any, Iterator

log = logging.getLogger(__name__)

CONFIG_KEY = "user_emails"
MAIL_COMMAND = "calaos_mail"
MAIL_FROM = "noreply@example.com"


class UserInfoModel:
    """The list of user e-mail addresses, saved as a comma separated option."""

    def __init__(self, config: Any) -> None:
        self.config = config
        self.emails: list[str] = []

    def __len__(self) -> int:
        return len(self.emails)

    def __iter__(self) -> Iterator[str]:
        return iter(self.emails)

    def load(self) -> None:
        """Append the addresses stored in the configuration."""
        stored = self.config.get_option(CONFIG_KEY)
        if not stored:
            return
        self.emails.extend(stored.split(","))

    def save(self) -> None:
        self.config.set_option(CONFIG_KEY, ",".join(self.emails))

    def add_email(self, email: str) -> None:
        self.emails.append(email)
        self.save()

    def delete_email(self, idx: int) -> None:
        """Remove the address at a row; rows out of range are ignored."""
        if not 0 <= idx < len(self.emails):
            return
        del self.emails[idx]
        self.save()

    def is_empty(self) -> bool:
        return not self.emails

    def send_email(self, subject: str, body: str) -> None:
        """Mail every registered address through the mail helper program."""
        for email in self.emails:
            self._send_one(email, subject, body)

    def _send_one(self, email: str, subject: str, body: str) -> None:
        with tempfile.NamedTemporaryFile("wb", delete=False) as tmp:
            tmp.write(body.encode("utf-8"))
            body_path = tmp.name

        args = [
            MAIL_COMMAND,
            "--delete",
            "--from",
            MAIL_FROM,
            "--to",
            email,
            "--subject",
            subject,
            "--body",
            body_path,
        ]
        log.debug("Starting %s with: %s", MAIL_COMMAND, args[1:])
        try:
            subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            log.warning("Failed to start %s: %s", MAIL_COMMAND, exc)
            os.unlink(body_path)