"""Short join codes for quizzes.

Codes are six characters drawn uniformly from ``A-Z0-9``. They only need to
be collision resistant, not unguessable, so the ``random`` module is enough.
"""

import inspect
import logging
import random
import string
from typing import Awaitable, Callable, Union

from src.core.exceptions import CodeGenerationExhausted

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6
MAX_ATTEMPTS = 100


def generate_code(length: int = CODE_LENGTH, rng: random.Random = None) -> str:
    rng = rng or random
    return "".join(rng.choices(CODE_ALPHABET, k=length))


def is_valid_code(code: str) -> bool:
    return len(code) == CODE_LENGTH and all(char in CODE_ALPHABET for char in code)


async def generate_unique_code(
    exists: Callable[[str], Union[bool, Awaitable[bool]]],
    max_attempts: int = MAX_ATTEMPTS,
    rng: random.Random = None,
) -> str:
    """Draw codes until ``exists`` reports one as free.

    ``exists`` may be a plain or an async callable. Raises
    ``CodeGenerationExhausted`` once ``max_attempts`` candidates were taken.
    """
    for attempt in range(1, max_attempts + 1):
        code = generate_code(rng=rng)
        taken = exists(code)
        if inspect.isawaitable(taken):
            taken = await taken
        if not taken:
            return code
        logger.debug("Quiz code %s is taken (attempt %d/%d)", code, attempt, max_attempts)

    logger.error("Quiz code space exhausted after %d attempts", max_attempts)
    raise CodeGenerationExhausted(max_attempts)
