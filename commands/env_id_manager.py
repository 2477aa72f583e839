# commands/env_id_manager.py
# -*- coding: utf-8 -*-
"""
Assigns the environment its name and identity.
"""

import logging
import random
import re
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from commands.errors import CommandError
from commands.interfaces import EnvIDManager as EnvIDManagerContract
from storage.state import State

module_logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")

INVALID_NAME_MESSAGE = (
    "Names must start with a letter and be alphanumeric or hyphenated."
)

GENERATED_NAME_WORDS = (
    "erie",
    "huron",
    "ladoga",
    "malawi",
    "michigan",
    "onega",
    "superior",
    "tahoe",
    "titicaca",
    "victoria",
)


class EnvIDManager(EnvIDManagerContract):
    """Gives a state a stable env id and uuid the first time it is synced."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        choose: Callable[..., str] = random.choice,
    ):
        self.logger = logger or module_logger
        self.clock = clock
        self.choose = choose

    def sync(self, state: State, name: str) -> State:
        """
        Return a copy of ``state`` with ``env_id`` and ``id`` populated.

        An existing env id is never changed. Otherwise ``name`` is used if
        given, or a name is generated.

        Raises:
            CommandError: ``name`` is not a valid environment name.
        """
        updates = {}

        if not state.env_id:
            if name:
                if not NAME_PATTERN.match(name):
                    raise CommandError(INVALID_NAME_MESSAGE)
                updates["env_id"] = name
            else:
                updates["env_id"] = self._generate_name()
            self.logger.info(f"Environment name: {updates['env_id']}")

        if not state.id:
            updates["id"] = str(uuid.uuid4())

        return state.model_copy(update=updates, deep=True)

    def _generate_name(self) -> str:
        timestamp = self.clock().strftime("%Y%m%d%H%M%S")
        return f"bbl-env-{self.choose(GENERATED_NAME_WORDS)}-{timestamp}"
